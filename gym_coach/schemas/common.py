from typing import Optional


def required_text(value: str, field: str) -> str:
    normalized = value.strip()
    if not normalized:
        raise ValueError(f"{field} is required")
    return normalized


def optional_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    normalized = value.strip()
    return normalized or None


def password_text(value: str) -> str:
    """Reject a blank password; anything else is kept exactly as typed."""
    if not value.strip():
        raise ValueError("password is required")
    return value
