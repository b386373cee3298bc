import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union
from urllib.parse import urlsplit

ALLOWED_SCHEMES = ("http://", "https://")
DEFAULT_SCHEME = "https://"

ALLOWED_TLDS = frozenset(
    {"com", "net", "org", "in", "io", "app", "tech", "dev", "edu", "gov", "info"}
)

# scheme, optional www., exactly one host label, one dot, alphabetic TLD.
# Nothing may follow the TLD: no path, port, query or trailing slash.
URL_PATTERN = re.compile(r"https?://(?:(?i:www)\.)?([A-Za-z0-9-]+)\.([A-Za-z]{2,})")


class ValidationError(str, Enum):
    EMPTY = "empty"
    MALFORMED_FORMAT = "malformed_format"
    DISALLOWED_TLD = "disallowed_tld"


@dataclass(frozen=True)
class Valid:
    url: str


@dataclass(frozen=True)
class Invalid:
    reason: ValidationError


ValidationResult = Union[Valid, Invalid]


def normalize_url(url: str) -> str:
    """
    Trim the input and add ``https://`` when it has no http(s) scheme.

    The scheme check is case-sensitive and nothing else is rewritten,
    so an empty input comes back as ``https://``.
    """
    url = url.strip()

    if not url.startswith(ALLOWED_SCHEMES):
        return f"{DEFAULT_SCHEME}{url}"

    return url


def validate_url(url: str) -> ValidationResult:
    if not url or not url.strip():
        return Invalid(ValidationError.EMPTY)

    normalized_url = normalize_url(url)

    match = URL_PATTERN.fullmatch(normalized_url)
    if not match:
        return Invalid(ValidationError.MALFORMED_FORMAT)

    tld = match.group(2).lower()
    if tld not in ALLOWED_TLDS:
        return Invalid(ValidationError.DISALLOWED_TLD)

    return Valid(normalized_url)


def extract_hostname(url: str) -> Optional[str]:
    """Return the host part of an absolute URL, or None if there is none."""
    try:
        hostname = urlsplit(url).hostname
    except ValueError:
        return None

    return hostname or None
