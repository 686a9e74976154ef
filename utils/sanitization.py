# utils/sanitization.py
from typing import Optional
import re

CONTROL_CHARS = r"[\x00-\x08\x0b-\x0c\x0e-\x1f\x7f-\x9f]"


def clean_text(value: Optional[str]) -> str:
    if value is None:
        return ""

    text = re.sub(CONTROL_CHARS, "", value)
    return text.strip()


def blank_to_none(value: Optional[str]) -> Optional[str]:
    """Optional text columns store NULL rather than an empty string."""
    text = clean_text(value)
    return text or None


def safe_filename(name: Optional[str]) -> str:
    # Object keys keep the original name, minus path separators
    base = clean_text(name).replace("\\", "/").split("/")[-1]
    return base or "upload.pdf"
