"""Seed the shared ``tracks`` catalog from a JSON export.

Usage: python scripts/seed_tracks.py path/to/tracks.json

Each entry needs ``name`` and may carry ``desc``, ``lat``, ``lon``, ``slug``
and ``status``. Rows are inserted with the service-role key.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Iterable, List

from mxhub.core.config import Config
from mxhub.core.validation import slugify
from mxhub.services.supabase_service import get_client

BATCH_SIZE = 100

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
)
logger = logging.getLogger("seed_tracks")


def to_row(track: dict) -> dict:
    return {
        "name": track["name"],
        "description": track.get("desc"),
        "longitude": track.get("lon"),
        "latitude": track.get("lat"),
        "slug": track.get("slug") or slugify(track["name"]),
        "status": track.get("status") or 1,
    }


def batches(rows: List[dict], size: int = BATCH_SIZE) -> Iterable[List[dict]]:
    for start in range(0, len(rows), size):
        yield rows[start:start + size]


def seed_tracks(supabase, tracks: List[dict], batch_size: int = BATCH_SIZE) -> int:
    rows = [to_row(track) for track in tracks]
    logger.info(f"Preparing to insert {len(rows)} tracks...")

    inserted = 0
    for number, batch in enumerate(batches(rows, batch_size), start=1):
        logger.info(f"Inserting batch {number}...")
        result = supabase.table("tracks").insert(batch).execute()
        inserted += len(result.data or [])
        logger.info(f"Inserted {len(result.data or [])} tracks in batch {number}")

    logger.info(f"Completed seeding. Total tracks inserted: {inserted}")
    return inserted


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("path", type=Path, help="JSON file holding a list of tracks")
    parser.add_argument("--batch-size", type=int, default=BATCH_SIZE)
    args = parser.parse_args(argv)

    try:
        Config.validate()
        tracks = json.loads(args.path.read_text(encoding="utf-8"))
        seed_tracks(get_client(), tracks, args.batch_size)
    except Exception as e:
        logger.error(f"Failed to seed tracks: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
