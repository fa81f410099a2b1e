"""MongoDB database connection using Motor (async driver)."""

import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from app.core.config import settings

logger = logging.getLogger(__name__)

# Collection names
SETTINGS_COLLECTION = "nps_settings"
RESPONSES_COLLECTION = "nps_responses"
SURVEYS_COLLECTION = "nps_pending_surveys"

# Global MongoDB client and database instances
mongodb_client: AsyncIOMotorClient | None = None
mongodb_db: AsyncIOMotorDatabase | None = None


async def connect_mongodb() -> None:
    """Connect to MongoDB."""
    global mongodb_client, mongodb_db

    mongodb_client = AsyncIOMotorClient(
        settings.mongodb_url,
        maxPoolSize=50,
        minPoolSize=5,
        maxIdleTimeMS=30000,
        connectTimeoutMS=5000,
        serverSelectionTimeoutMS=5000,
    )
    mongodb_db = mongodb_client[settings.mongodb_database]

    # Test connection
    try:
        await mongodb_client.admin.command("ping")
        logger.info(f"Connected to MongoDB: {settings.mongodb_database}")
    except Exception as e:
        logger.error(f"Failed to connect to MongoDB: {e}")
        raise


async def close_mongodb() -> None:
    """Close MongoDB connection."""
    global mongodb_client, mongodb_db

    if mongodb_client:
        mongodb_client.close()
        mongodb_client = None
        mongodb_db = None
        logger.info("MongoDB connection closed")


def get_mongodb() -> AsyncIOMotorDatabase:
    """Get MongoDB database instance."""
    if mongodb_db is None:
        raise RuntimeError("MongoDB is not connected")
    return mongodb_db


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """
    Create indexes for the NPS collections.

    Called from the activation hook; safe to call repeatedly.
    """
    responses_col = db[RESPONSES_COLLECTION]
    await responses_col.create_index("contact_id")
    await responses_col.create_index("ticket_id")
    await responses_col.create_index([("agent_id", 1), ("created_at", -1)])
    await responses_col.create_index("created_at")

    surveys_col = db[SURVEYS_COLLECTION]
    await surveys_col.create_index("token", unique=True)
    await surveys_col.create_index([("contact_id", 1), ("status", 1)])
    await surveys_col.create_index([("status", 1), ("send_at", 1)])

    logger.info("Created NPS collection indexes")
