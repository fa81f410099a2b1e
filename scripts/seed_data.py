#!/usr/bin/env python3
"""
Seed script to create initial data for development and testing.

Run this script against a local MongoDB to set up:
- The default NPS configuration and collection indexes
- Demo responses spread over the last six months
- A dashboard admin access token

Usage:
    python scripts/seed_data.py

The script will output the credentials needed to test the API.
"""

import asyncio
import random
import sys
from datetime import timedelta
from pathlib import Path

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.core.config import settings
from app.core.security import create_access_token
from app.core.timeutils import to_iso, utcnow
from app.db.mongodb import close_mongodb, connect_mongodb, get_mongodb
from app.db.redis import close_redis, connect_redis, get_redis
from app.dependencies.services import build_mongo_services

AGENTS = ["agent_ana", "agent_ben", "agent_cho"]
TEAMS = ["support", "billing"]
CATEGORIES = ["billing", "shipping", "technical", ""]
COMMENTS = ["", "Fast and helpful", "Took too long", "Solved my problem"]
DEMO_RESPONSES = 60


async def seed_database():
    """Create initial seed data."""
    services = build_mongo_services(get_mongodb(), get_redis())

    await services.events.on_activate()

    if await services.responses.all():
        print("Database already has responses. Skipping demo data.")
    else:
        print("Creating seed data...")
        print("-" * 50)

        rng = random.Random(42)
        now = utcnow()
        for i in range(DEMO_RESPONSES):
            created_at = now - timedelta(days=rng.randint(0, 180), minutes=rng.randint(0, 1440))
            await services.responses.save({
                # Explicit ids keep the random timestamps
                "id": f"nps_demo{i:04d}",
                "contact_id": f"contact_{rng.randint(1, 25)}",
                "ticket_id": f"T{1000 + i}",
                "agent_id": rng.choice(AGENTS),
                "team_id": rng.choice(TEAMS),
                "category": rng.choice(CATEGORIES),
                "score": rng.choices(range(11), weights=[1, 1, 1, 1, 1, 2, 2, 4, 5, 7, 8])[0],
                "comment": rng.choice(COMMENTS),
                "created_at": to_iso(created_at),
            })

        nps = await services.scoring.score()
        print(f"Created {DEMO_RESPONSES} responses (NPS {nps.score})")

    token = create_access_token(
        {"sub": "seed-admin", "role": "admin", "email": "admin@demo.com", "name": "Demo Admin"},
        expires_delta=timedelta(days=7),
    )

    print("\n" + "=" * 50)
    print("Seed data created successfully!")
    print("=" * 50)

    # Print summary for easy copy-paste
    print("\n--- Quick Reference ---\n")
    print("Dashboard (valid 7 days):")
    print(f"  Authorization: Bearer {token}")

    print("\nHost events:")
    print(f"  POST {settings.api_prefix}/nps/events/ticket-resolved")
    print(f"  X-API-Key: {settings.host_api_key or '<set HOST_API_KEY>'}")


async def main():
    """Main entry point."""
    print(f"Environment: {settings.environment}")
    print(f"Database: {settings.mongodb_url}/{settings.mongodb_database}")
    print()

    await connect_mongodb()
    await connect_redis()
    try:
        await seed_database()
    finally:
        await close_mongodb()
        await close_redis()


if __name__ == "__main__":
    asyncio.run(main())
