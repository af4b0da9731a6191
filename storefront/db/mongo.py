# storefront/db/mongo.py
import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase, AsyncIOMotorGridFSBucket
from storefront.core.config import get_settings
import certifi

logger = logging.getLogger(__name__)

_client: AsyncIOMotorClient | None = None
_db: AsyncIOMotorDatabase | None = None


class StoreUnavailable(RuntimeError):
    """Raised when a request needs Mongo and no client is initialized."""


def get_db() -> AsyncIOMotorDatabase:
    if _db is None:
        raise StoreUnavailable("Mongo DB not initialized")
    return _db


def get_db_or_none() -> AsyncIOMotorDatabase | None:
    return _db


def get_bucket(db: AsyncIOMotorDatabase) -> AsyncIOMotorGridFSBucket:
    return AsyncIOMotorGridFSBucket(db, bucket_name=get_settings().uploads_bucket)


def _new_client() -> AsyncIOMotorClient:
    settings = get_settings()
    kwargs = dict(
        uuidRepresentation="standard",
        serverSelectionTimeoutMS=6000,
        connectTimeoutMS=6000,
    )
    if settings.MONGO_TLS:
        kwargs.update(tls=True, tlsCAFile=certifi.where())   # explicit CA bundle for containers
    return AsyncIOMotorClient(settings.MONGO_URI, **kwargs)


async def connect():
    """
    Create the Motor client.
    A failed startup ping does not abort the app: the client stays lazy and
    the first real query retries the connection.
    """
    global _client, _db
    settings = get_settings()

    try:
        _client = _new_client()
        _db = _client[settings.MONGO_DB]
        await _client.admin.command("ping")
        logger.info("Mongo connected (ping ok) db=%s", settings.MONGO_DB)
    except Exception as e:
        logger.warning("Mongo ping at startup failed: %s", e)
        try:
            _client = _new_client()
            _db = _client[settings.MONGO_DB]
            logger.warning("Mongo will attempt lazy connection on first query")
        except Exception as e2:
            # routes that need the DB will get StoreUnavailable
            _client = None
            _db = None
            logger.error("Mongo client init failed: %s", e2)


async def ensure_indexes():
    db = get_db()
    await db["products"].create_index("id", unique=True)
    await db["products"].create_index([("created_at", -1)])
    await db["categories"].create_index("id", unique=True)
    await db["categories"].create_index("name_key", unique=True)
    await db["users"].create_index("email", unique=True)


async def disconnect():
    global _client, _db
    if _client:
        _client.close()
    _client = None
    _db = None
