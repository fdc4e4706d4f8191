import re

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]{2,}$")

def validate_name(v: str) -> str:
    v = (v or "").strip()
    if not v:
        raise ValueError("Name is required")
    if len(v) > 50:
        raise ValueError("Name cannot exceed 50 characters")
    return v

def validate_password(v: str) -> str:
    if len(v or "") < 6:
        raise ValueError("Password must be at least 6 characters long")
    return v

def is_valid_email(v: str) -> bool:
    return bool(_EMAIL_RE.match((v or "").strip()))
