"""Field validation helpers shared by request forms and storage.

Functions:
- validate_email(email) -> bool: Check email format
- validate_score(value, field_name) -> int: Check a 0-100 percentage
- validate_choice(value, choices, field_name) -> str: Check an enumerated value
"""

import re

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+$")

# bcrypt only hashes the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


def validate_email(email: str) -> bool:
    """Validate email format. Empty string is not valid.

    Args:
        email: Email address to validate

    Returns:
        True if the address looks like user@domain.tld
    """
    return bool(email) and bool(EMAIL_PATTERN.match(email))


def validate_score(value: int, field_name: str = "score") -> int:
    """Ensure a percentage lies within 0-100.

    Raises:
        ValueError: If the value is outside the range or not an integer.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{field_name} must be an integer")
    if not 0 <= value <= 100:
        raise ValueError(f"{field_name} must be between 0 and 100, got {value}")
    return value


def validate_choice(value: str, choices: tuple[str, ...], field_name: str) -> str:
    """Ensure an enumerated field holds one of its allowed values.

    Raises:
        ValueError: If the value is not in choices.
    """
    if value not in choices:
        raise ValueError(
            f"{field_name} must be one of: {', '.join(choices)} (got '{value}')"
        )
    return value


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES
