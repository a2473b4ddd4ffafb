"""Data model shared by the reconciliation engine and its callers."""

from .diff import DiffOp, OpKind
from .docblock import Docblock, coerce_docblocks

__all__ = ["DiffOp", "Docblock", "OpKind", "coerce_docblocks"]
