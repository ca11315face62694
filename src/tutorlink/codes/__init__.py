"""Codes - shareable tutor and course code generation."""

from tutorlink.codes.generator import (
    CODE_ALPHABET,
    DEFAULT_FORMATS,
    CodeFormat,
    CodeGenerator,
    CodeNamespace,
    canonicalize,
)

__all__ = [
    "CODE_ALPHABET",
    "DEFAULT_FORMATS",
    "CodeFormat",
    "CodeGenerator",
    "CodeNamespace",
    "canonicalize",
]
