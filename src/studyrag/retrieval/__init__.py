"""Retrieval: assembling bounded prompt context from stored chunks."""

from .assembler import AssembledContext, ContextAssembler, build_context

__all__ = ["AssembledContext", "ContextAssembler", "build_context"]
