"""
Password policy validation.

validate_password() is pure and deterministic: the same input always
produces the same result, with no I/O and no randomness.
"""

import re
import secrets

from .models import PasswordValidationResult, PasswordMatchResult

MIN_LENGTH = 8
RECOMMENDED_LENGTH = 12
BONUS_LENGTH = 16

# Score ceilings
COMMON_PASSWORD_CAP = 20
WEAK_PATTERN_CAP = 30
ERROR_CAP = 40
ADVICE_CAP = 70

COMMON_PASSWORDS = frozenset({
    "password", "password123", "123456", "12345678", "123456789", "12345",
    "qwerty", "abc123", "password1", "1234567", "welcome", "monkey",
    "qwerty123", "1234567890", "iloveyou", "admin", "letmein", "master",
    "sunshine", "princess", "football", "charlie", "login", "starwars",
})

WEAK_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"^(.)\1+$"), "Password cannot be all the same character"),
    (
        re.compile(r"^(012|123|234|345|456|567|678|789|890)+"),
        "Password contains sequential numbers",
    ),
    (
        re.compile(
            r"^(abc|bcd|cde|def|efg|fgh|ghi|hij|ijk|jkl|klm|lmn|mno|nop|opq|pqr"
            r"|qrs|rst|stu|tuv|uvw|vwx|wxy|xyz)+",
            re.IGNORECASE,
        ),
        "Password contains sequential letters",
    ),
    (re.compile(r"^(qwerty|asdfgh|zxcvbn)", re.IGNORECASE), "Password contains keyboard pattern"),
)

REPEATED_SEQUENCE = re.compile(r"(.{3,})\1")

SPECIAL_CHARACTERS = "!@#$%^&*()_+-=[]{}|;:,.<>?"


def is_common_password(password: str) -> bool:
    """Case-insensitive blocklist lookup."""
    return password.lower() in COMMON_PASSWORDS


def validate_password(password: str) -> PasswordValidationResult:
    """
    Validate password strength and composition.

    Args:
        password: Candidate password

    Returns:
        PasswordValidationResult with score, blocking errors and advice
    """
    errors: list[str] = []
    suggestions: list[str] = []
    score = 0
    # Caps from blocklist, pattern and advice checks hold after every bonus
    ceiling = 100

    if len(password) < MIN_LENGTH:
        errors.append(f"Password must be at least {MIN_LENGTH} characters long")
    elif len(password) < RECOMMENDED_LENGTH:
        suggestions.append(
            f"Consider using at least {RECOMMENDED_LENGTH} characters for better security"
        )
        score += 20
    else:
        score += 30

    if not re.search(r"[A-Z]", password):
        errors.append("Password must contain at least one uppercase letter (A-Z)")
    else:
        score += 15

    if not re.search(r"[a-z]", password):
        errors.append("Password must contain at least one lowercase letter (a-z)")
    else:
        score += 15

    if not re.search(r"[0-9]", password):
        errors.append("Password must contain at least one number (0-9)")
    else:
        score += 15

    if not re.search(r"[^A-Za-z0-9]", password):
        errors.append(
            f"Password must contain at least one special character ({SPECIAL_CHARACTERS})"
        )
    else:
        score += 15

    if is_common_password(password):
        errors.append("This password is too common and easily guessable")
        ceiling = min(ceiling, COMMON_PASSWORD_CAP)

    for pattern, message in WEAK_PATTERNS:
        if pattern.search(password):
            errors.append(message)
            ceiling = min(ceiling, WEAK_PATTERN_CAP)

    if REPEATED_SEQUENCE.search(password):
        suggestions.append("Avoid repeating sequences in your password")
        ceiling = min(ceiling, ADVICE_CAP)

    if len(password) >= BONUS_LENGTH:
        score += 10

    # Empty input has no variety to measure; the length error already applies
    variety = len(set(password)) / len(password) if password else 0.0
    if variety < 0.5:
        suggestions.append("Use a wider variety of characters")
        ceiling = min(ceiling, ADVICE_CAP)
    else:
        score += 10

    score = max(0, min(score, ceiling))

    if errors:
        score = min(score, ERROR_CAP)

    return PasswordValidationResult(
        valid=not errors,
        score=score,
        errors=errors,
        suggestions=suggestions if not errors else [],
    )


def get_password_strength(score: int) -> str:
    """Human label for a strength score."""
    if score < 40:
        return "Weak"
    if score < 60:
        return "Fair"
    if score < 80:
        return "Good"
    return "Strong"


def generate_secure_password(length: int = 16) -> str:
    """
    Generate a random password containing every character class.

    Uses the secrets module. Callers that store the result should still
    run it through validate_password.
    """
    if length < 4:
        raise ValueError("length must be at least 4")

    lowercase = "abcdefghijklmnopqrstuvwxyz"
    uppercase = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    numbers = "0123456789"
    alphabet = lowercase + uppercase + numbers + SPECIAL_CHARACTERS

    chars = [
        secrets.choice(lowercase),
        secrets.choice(uppercase),
        secrets.choice(numbers),
        secrets.choice(SPECIAL_CHARACTERS),
    ]
    chars.extend(secrets.choice(alphabet) for _ in range(length - len(chars)))

    # Fisher-Yates with a CSPRNG so required classes are not always first
    for i in range(len(chars) - 1, 0, -1):
        j = secrets.randbelow(i + 1)
        chars[i], chars[j] = chars[j], chars[i]
    return "".join(chars)


def validate_password_match(password: str, confirmation: str) -> PasswordMatchResult:
    """Check a password against its confirmation field."""
    if password != confirmation:
        return PasswordMatchResult(valid=False, error="Passwords do not match")
    return PasswordMatchResult(valid=True)
