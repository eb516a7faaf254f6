"""
Password policy module.

Public API:
- validate_password: strength scoring and composition rules
- get_password_strength, generate_secure_password, validate_password_match
- PasswordValidationResult
"""

from .models import PasswordValidationResult, PasswordMatchResult
from .validator import (
    validate_password,
    get_password_strength,
    generate_secure_password,
    validate_password_match,
    is_common_password,
)

__all__ = [
    "PasswordValidationResult",
    "PasswordMatchResult",
    "validate_password",
    "get_password_strength",
    "generate_secure_password",
    "validate_password_match",
    "is_common_password",
]
