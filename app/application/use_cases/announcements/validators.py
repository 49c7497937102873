"""Common validation helpers for announcement use cases."""

import re

from app.domain.exceptions import InvalidIdentifierError

_UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)


def ensure_valid_identifier(value: str, *, label: str = "identifier") -> str:
    """Return ``value`` when it is UUID shaped or raise ``InvalidIdentifierError``."""

    if not isinstance(value, str) or not _UUID_PATTERN.match(value):
        raise InvalidIdentifierError(f"Invalid {label} format")
    return value
