"""Normalisation of text produced by document extraction."""

import re

MIN_TEXT_LENGTH = 10


class Cleaner:
    """Basic text cleaner for extracted document text."""

    def clean(self, text: str) -> str:
        """Normalise line endings and whitespace and strip NUL characters."""
        if not text:
            return ""
        text = text.replace("\0", "")
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        text = text.replace("\t", " ")
        text = re.sub(r" {2,}", " ", text)
        text = re.sub(r"\n{3,}", "\n\n", text)
        return text.strip()


def clean_extracted_text(text: str) -> str:
    return Cleaner().clean(text)
