# database.py
import logging
from motor.motor_asyncio import AsyncIOMotorClient
import config

logger = logging.getLogger(__name__)

client = AsyncIOMotorClient(config.MONGODB_URI, tz_aware=True)
db = client[config.MONGODB_DB]

def get_employee_collection():
    return db["employees"]

def get_user_collection():
    return db["users"]

async def ensure_indexes():
    """Create the unique indexes the record store relies on."""
    await get_employee_collection().create_index("email", unique=True)
    await get_user_collection().create_index("username", unique=True)
    logger.info("MongoDB indexes ensured")
