from __future__ import annotations

PASSWORD_MIN_LENGTH = 8
WEAK_PASSWORDS = frozenset({"password", "12345678", "qwertyui", "password1", "password123", "letmein123"})


def validate_password_strength(password: str) -> tuple[bool, str | None]:
    """Validate password strength before handing it to the auth provider."""
    if len(password) < PASSWORD_MIN_LENGTH:
        return False, f"Password must be at least {PASSWORD_MIN_LENGTH} characters long"

    if password.lower() in WEAK_PASSWORDS:
        return False, "Password is too weak. Please choose a stronger password."
    return True, None
