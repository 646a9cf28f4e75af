import logging
from typing import Any, Optional

from fastapi import HTTPException
from postgrest.exceptions import APIError
from supabase import create_client, Client

from ..core.config import Config


logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"
NO_ROWS = "PGRST116"


def get_client() -> Client:
    return create_client(Config.SUPABASE_URL, Config.SUPABASE_SERVICE_KEY)


def get_anon_client() -> Client:
    return create_client(Config.SUPABASE_URL, Config.SUPABASE_ANON_KEY)


def get_user_client(access_token: str) -> Client:
    """Client whose table queries run as the signed-in user, so row-level
    security is enforced by the backend."""
    supabase = get_anon_client()
    supabase.postgrest.auth(access_token)
    return supabase


def execute(query: Any, action: str, *, conflict_detail: Optional[str] = None) -> list[dict]:
    """Run a query builder and return its rows.

    Backend errors become HTTP errors: unique violations are 409 (with
    ``conflict_detail`` when given), "no rows" is 404 and everything else 500.
    """
    try:
        result = query.execute()
    except APIError as e:
        if e.code == UNIQUE_VIOLATION:
            logger.info(f"Conflict while trying to {action}: {e.message}")
            raise HTTPException(status_code=409, detail=conflict_detail or "Record already exists")
        if e.code == NO_ROWS:
            raise HTTPException(status_code=404, detail="Record not found")
        logger.error(f"Failed to {action}: [{e.code}] {e.message}")
        raise HTTPException(status_code=500, detail=f"Failed to {action}")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to {action}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to {action}")

    return result.data or []


def first_or_404(rows: list[dict], detail: str) -> dict:
    if not rows:
        raise HTTPException(status_code=404, detail=detail)
    return rows[0]
