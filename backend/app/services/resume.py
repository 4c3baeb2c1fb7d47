"""Resume and cover-letter reference validation."""
import logging
from pathlib import PurePosixPath
from typing import Optional
from urllib.parse import urlparse

from app.errors import ValidationError

logger = logging.getLogger(__name__)

# Configuration
MAX_REFERENCE_LENGTH = 500
ALLOWED_EXTENSIONS = {".pdf", ".docx", ".doc"}
ALLOWED_SCHEMES = {"http", "https"}


def is_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ALLOWED_SCHEMES and bool(parsed.netloc)


def validate_document_reference(value: Optional[str], field: str = "resume", required: bool = True) -> Optional[str]:
    """
    Validate a resume or cover-letter reference.

    Accepts an http(s) URL or a bare filename with an allowed extension.

    Raises:
        ValidationError: If the reference is missing or invalid
    """
    value = (value or "").strip()
    if not value:
        if required:
            raise ValidationError(f"{field} is required", fields=[field])
        return None

    if len(value) > MAX_REFERENCE_LENGTH:
        raise ValidationError(f"{field} reference too long (max {MAX_REFERENCE_LENGTH} characters)", fields=[field])

    if is_url(value):
        return value
    if "://" in value:
        raise ValidationError(f"Invalid {field}: only http(s) links are accepted", fields=[field])

    ext = PurePosixPath(value).suffix.lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise ValidationError(
            f"Invalid {field}: expected a URL or a file ending in {', '.join(sorted(ALLOWED_EXTENSIONS))}",
            fields=[field],
        )
    return value
