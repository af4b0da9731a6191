# storefront/core/lifespan.py
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from storefront.db import mongo, redis as r
from storefront.core.config import get_settings
from storefront.domain.repositories.category_repo import CategoryRepo
from storefront.domain.services.constants import DEFAULT_CATEGORIES

logger = logging.getLogger(__name__)


async def _prepare_store() -> None:
    """Indexes + default categories on an empty store. Failures are logged, not fatal."""
    try:
        await mongo.ensure_indexes()
        seeded = await CategoryRepo(mongo.get_db()).seed_defaults(DEFAULT_CATEGORIES)
        if seeded:
            logger.info("Seeded %s default categories", seeded)
    except Exception as e:
        logger.warning("Store preparation skipped: %s", e)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()

    # --- Startup ---
    # Mongo is required for the catalog; a failed ping leaves a lazy client
    if settings.MONGO_URI:
        await mongo.connect()
        if mongo.get_db_or_none() is not None:
            await _prepare_store()
    else:
        logger.warning("No MONGO_URI provided, catalog endpoints will answer 503")

    # Redis optional
    await r.connect()

    yield

    # --- Shutdown ---
    try:
        await r.disconnect()
    except Exception as e:
        logger.warning("Redis disconnect failed: %s", e)

    try:
        await mongo.disconnect()
        logger.info("Mongo disconnected")
    except Exception as e:
        logger.warning("Mongo disconnect failed: %s", e)
