#!/usr/bin/env python3
"""
Process the NPS survey queue once.

Meant to run from cron (hourly is enough). Due pending surveys are sent,
skipped when the contact was surveyed too recently, or marked failed when
the mail webhook rejects them.

Usage:
    python scripts/process_survey_queue.py
"""

import asyncio
import logging
import sys
from pathlib import Path

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.core.logging import setup_logging
from app.db.mongodb import close_mongodb, connect_mongodb, get_mongodb
from app.db.redis import close_redis, connect_redis, get_redis
from app.dependencies.services import build_mongo_services
from app.integrations.mail import get_email_transport

logger = logging.getLogger("process_survey_queue")


async def main() -> int:
    """Main entry point."""
    setup_logging()

    await connect_mongodb()
    await connect_redis()
    try:
        # No broadcaster: Socket.IO lives in the API process
        services = build_mongo_services(
            get_mongodb(),
            get_redis(),
            transport=get_email_transport(),
        )
        processed = await services.events.on_periodic_sweep()
    finally:
        await close_mongodb()
        await close_redis()

    counts: dict[str, int] = {}
    for survey in processed:
        counts[survey.status] = counts.get(survey.status, 0) + 1
    logger.info(f"Processed {len(processed)} survey(s): {counts or 'nothing due'}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
