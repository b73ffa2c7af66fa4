"""Namespace naming for per-owner vector isolation.

Each owner gets two namespaces: one for study materials and one for past
papers. The separator is a colon, which owner ids may not contain, so no
owner id can ever produce another owner's past-papers namespace.
"""

from .entities.document import ContentKind
from .errors import AccessDeniedError

NAMESPACE_PREFIX = "user_"
PAST_PAPERS_SUFFIX = ":pastpapers"


def namespace_for(owner_id: str, content_kind: ContentKind | str = ContentKind.MATERIALS) -> str:
    """Return the namespace holding ``owner_id``'s chunks of the given kind.

    Raises:
        AccessDeniedError: If the owner id is empty or contains the separator
    """
    if not owner_id:
        raise AccessDeniedError("owner_id cannot be empty")
    if ":" in owner_id:
        raise AccessDeniedError(
            f"owner_id may not contain ':': {owner_id!r}",
            details={"owner_id": owner_id},
        )

    base = f"{NAMESPACE_PREFIX}{owner_id}"
    if ContentKind(content_kind) is ContentKind.PAST_PAPERS:
        return base + PAST_PAPERS_SUFFIX
    return base


def owner_of(namespace: str) -> str:
    """Recover the owner id from a namespace produced by ``namespace_for``."""
    if not namespace.startswith(NAMESPACE_PREFIX):
        raise ValueError(f"Not a StudyRAG namespace: {namespace!r}")
    body = namespace[len(NAMESPACE_PREFIX):]
    if body.endswith(PAST_PAPERS_SUFFIX):
        body = body[: -len(PAST_PAPERS_SUFFIX)]
    return body
