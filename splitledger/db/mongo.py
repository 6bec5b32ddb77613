import logging
from decimal import Decimal

from bson.codec_options import CodecOptions, TypeCodec, TypeRegistry
from bson.decimal128 import Decimal128
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from splitledger.core.config import settings

logger = logging.getLogger(__name__)


class DecimalCodec(TypeCodec):
    """Store Decimal as Decimal128 and read it back as Decimal."""
    python_type = Decimal
    bson_type = Decimal128

    def transform_python(self, value):
        return Decimal128(value)

    def transform_bson(self, value):
        return value.to_decimal()


CODEC_OPTIONS = CodecOptions(
    tz_aware=True,
    type_registry=TypeRegistry([DecimalCodec()]),
)


class MongoDatabase:
    """MongoDB connection manager."""

    client: AsyncIOMotorClient = None
    db: AsyncIOMotorDatabase = None

mongodb = MongoDatabase()

async def connect_to_mongo():
    """Connect to MongoDB."""
    mongodb.client = AsyncIOMotorClient(settings.MONGODB_URL)
    mongodb.db = mongodb.client.get_database(settings.DATABASE_NAME, codec_options=CODEC_OPTIONS)

    await create_indexes()
    logger.info("Connected to MongoDB: %s", settings.DATABASE_NAME)

async def close_mongo_connection():
    """Disconnect from MongoDB."""
    if mongodb.client is not None:
        mongodb.client.close()
    logger.info("Disconnected from MongoDB")

async def create_indexes():
    """Create database indexes."""
    await mongodb.db["users"].create_index("username", unique=True)
    await mongodb.db["users"].create_index("email", unique=True)

    # Association records are unique per pair
    await mongodb.db["group_members"].create_index([("group_id", 1), ("user_id", 1)], unique=True)
    await mongodb.db["group_members"].create_index("user_id")
    await mongodb.db["friendships"].create_index([("user_id", 1), ("friend_id", 1)], unique=True)
    await mongodb.db["friendships"].create_index("friend_id")

    await mongodb.db["expenses"].create_index([("group_id", 1), ("created_at", 1)])

    # Ledger indexes
    await mongodb.db["ledger_entries"].create_index([("user_id", 1), ("created_at", -1)])
    await mongodb.db["ledger_entries"].create_index("reference_id")

    await mongodb.db["settlements"].create_index("group_id")
    await mongodb.db["settlements"].create_index([("debtor_id", 1), ("creditor_id", 1)])

def get_db() -> AsyncIOMotorDatabase:
    """Get database instance."""
    return mongodb.db
