"""Validation package."""

from coa_compiler.validation.validator import COAValidator, NUMBERING_BY_DIGIT

__all__ = ["COAValidator", "NUMBERING_BY_DIGIT"]
