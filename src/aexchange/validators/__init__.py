r"""Validators accepting or rejecting responses before decoding."""

from __future__ import annotations

__all__ = [
    "BaseValidator",
    "StatusCodeValidator",
    "ValidationHandler",
    "ValidationResult",
    "Validator",
    "ZipValidator",
]

from aexchange.validators.base import BaseValidator, ValidationResult
from aexchange.validators.handler import ValidationHandler, Validator
from aexchange.validators.status_code import StatusCodeValidator
from aexchange.validators.zip import ZipValidator
