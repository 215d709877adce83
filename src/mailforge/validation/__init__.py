"""Validation engine: structure, accessibility, spam and client compatibility scoring."""

from .document import Document, Node, parse_document
from .engine import validate, validate_document
from .issues import ComplianceMetrics, ValidationIssue

__all__ = [
    "ComplianceMetrics",
    "Document",
    "Node",
    "ValidationIssue",
    "parse_document",
    "validate",
    "validate_document",
]
