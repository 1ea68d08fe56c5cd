# app/modules/shared/helpers.py
import re

SPECIAL_CHAR_RE = re.compile(r'[!@#$%^&*(),.?":{}|<>]')


def validate_password_strength(password: str):
    """
    Validate password meets security requirements.

    Raises:
        ValueError: If password doesn't meet requirements
    """
    if len(password) < 8:
        raise ValueError("Password must be at least 8 characters")
    if not any(c.isupper() for c in password):
        raise ValueError("Password must contain at least 1 uppercase letter")
    if not any(c.isdigit() for c in password):
        raise ValueError("Password must contain at least 1 number")
    if not SPECIAL_CHAR_RE.search(password):
        raise ValueError("Password must contain at least 1 special character")


def validate_display_name(name: str) -> str:
    """Trim a display name and require at least two characters."""
    name = (name or "").strip()
    if len(name) < 2:
        raise ValueError("Name must be at least 2 characters")
    return name
