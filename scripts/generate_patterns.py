#!/usr/bin/env python3
"""Print rotation patterns for a registered character as JSON.

Usage:
    python scripts/generate_patterns.py --user USER_ID --character 101
    python scripts/generate_patterns.py --user USER_ID --progress
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from umacrown.config import settings  # noqa: E402

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("generate_patterns")


async def run(user_id: str, character_id: Optional[int], progress: bool) -> int:
    from umacrown.models.database import async_session, init_db
    from umacrown.progress import fetch_remaining_summaries
    from umacrown.rotation.errors import CharacterNotFoundError
    from umacrown.rotation.service import RotationService

    settings.db_path.parent.mkdir(parents=True, exist_ok=True)
    await init_db()
    async with async_session() as db:
        if progress:
            summaries = await fetch_remaining_summaries(db, user_id)
            print(json.dumps([s.to_dict() for s in summaries], indent=2, ensure_ascii=False))
            return 0

        try:
            result = await RotationService().generate(db, user_id, character_id)
        except CharacterNotFoundError as e:
            logger.error(str(e))
            return 1

    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    return 0


def main():
    parser = argparse.ArgumentParser(description="Generate all-crown rotation patterns")
    parser.add_argument("--user", required=True, help="Owner of the registration")
    parser.add_argument("--character", type=int, default=None, help="Character id")
    parser.add_argument("--progress", action="store_true",
                        help="Print remaining-race summaries instead of patterns")
    args = parser.parse_args()

    if args.character is None and not args.progress:
        parser.error("--character is required unless --progress is given")

    sys.exit(asyncio.run(run(args.user, args.character, args.progress)))


if __name__ == "__main__":
    main()
