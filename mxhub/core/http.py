import logging
from typing import Any, Mapping, Optional

import requests
from fastapi import HTTPException

from .config import Config


logger = logging.getLogger(__name__)


def get_json(url: str, params: Optional[Mapping[str, Any]] = None, timeout_seconds: Optional[float] = None) -> Any:
    """Single GET against a public JSON API. No retries, no caching."""
    try:
        resp = requests.get(
            url,
            params=params,
            headers={"User-Agent": Config.HTTP_USER_AGENT, "Accept": "application/json"},
            timeout=timeout_seconds or Config.HTTP_TIMEOUT_SECONDS,
        )
        resp.raise_for_status()
        return resp.json()
    except (requests.RequestException, ValueError) as e:
        logger.error(f"Upstream request to {url} failed: {str(e)}")
        raise HTTPException(status_code=502, detail="Upstream request failed")
