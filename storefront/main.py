from fastapi import FastAPI
from storefront.core.config import get_settings
from storefront.core.errors import install_error_handlers
from storefront.core.lifespan import lifespan
from storefront.api.v1.routers.products import router as products_router
from storefront.api.v1.routers.categories import router as categories_router
from storefront.api.v1.routers.upload import router as upload_router
from storefront.api.v1.routers.files import router as files_router
from storefront.api.v1.routers.auth import router as auth_router
from storefront.api.v1.routers.stats import router as stats_router
from storefront.api.v1.routers.health import router as health_router
from storefront.core.logging import configure_logging

from fastapi.middleware.cors import CORSMiddleware
import logging

settings = get_settings()
configure_logging(level=logging.DEBUG if settings.DEBUG else logging.INFO)

app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# ------- CORS -------
# Storefront and admin are served from anywhere (pages preview URLs included).
# Only JSON and multipart bodies are sent, so Content-Type is the only header needed.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type"],
    max_age=86400,
)

install_error_handlers(app)

# ------- Routes -------
app.include_router(health_router)
app.include_router(files_router)                                   # public object URLs
app.include_router(products_router, prefix=settings.api_prefix)
app.include_router(categories_router, prefix=settings.api_prefix)
app.include_router(upload_router, prefix=settings.api_prefix)
app.include_router(auth_router, prefix=settings.api_prefix)
app.include_router(stats_router, prefix=settings.api_prefix)


def run() -> None:
    """Console entry point: `storefront`."""
    import uvicorn

    uvicorn.run("storefront.main:app", host="0.0.0.0", port=8000, log_config=None)
