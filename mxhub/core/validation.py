import logging
import re
from typing import Optional

from fastapi import HTTPException


logger = logging.getLogger(__name__)

IDENTIFIER_PATTERN = re.compile(r'^[a-zA-Z0-9_-]+$')
_SLUG_SEPARATORS = re.compile(r'[^a-z0-9]+')


def validate_identifier(value: Optional[str], field: str = "id") -> str:
    if not value or not IDENTIFIER_PATTERN.match(value):
        logger.warning(f"Rejected {field}: {value!r}")
        raise HTTPException(status_code=400, detail=f"Invalid {field} format")
    return value


def slugify(name: str) -> str:
    """Turn a track name into its URL slug, e.g. ``"Fox Raceway!"`` -> ``"fox-raceway"``."""
    return _SLUG_SEPARATORS.sub('-', name.lower()).strip('-')


def validate_coordinates(latitude: Optional[float], longitude: Optional[float]) -> None:
    if (latitude is None) != (longitude is None):
        raise HTTPException(status_code=400, detail="Latitude and longitude must be provided together")
    if latitude is None:
        return

    if not -90 <= latitude <= 90:
        raise HTTPException(status_code=400, detail="Latitude must be between -90 and 90")
    if not -180 <= longitude <= 180:
        raise HTTPException(status_code=400, detail="Longitude must be between -180 and 180")
