"""
Main application entry point for the Contacts API.

This module builds the FastAPI application: it configures logging and
CORS, installs the error handlers, initializes the rate limiter and
includes the routers for users, contacts and addresses.

Modules:
- FastAPI: Web framework
- CORSMiddleware: Middleware for handling CORS
- FastAPILimiter: Rate limiting
- redis.asyncio: Async Redis client
- fakeredis: In-process Redis used when no Redis server is configured
- contactbook.database: Database engine
- contactbook.models: SQLAlchemy models
- contactbook.users / contacts / addresses: Routers
- contactbook.core: Application settings
"""

import logging
from contextlib import asynccontextmanager

from fakeredis import FakeAsyncRedis, FakeServer
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi_limiter import FastAPILimiter
import redis.asyncio as redis
import uvicorn
from redis.exceptions import RedisError

from contactbook import models
from contactbook.addresses import router as addresses_router
from contactbook.contacts import router as contacts_router
from contactbook.core import Settings, get_settings
from contactbook.database import engine
from contactbook.errors import register_exception_handlers
from contactbook.logging_config import setup_logging
from contactbook.users import router as users_router

logger = logging.getLogger("contactbook")


async def get_limiter_redis(settings: Settings):
    """
    Return the Redis client backing the rate limiter.

    Uses ``settings.REDIS_URL`` when it is set and answers a ping,
    otherwise an in-process fake Redis.
    """
    if settings.REDIS_URL:
        client = redis.from_url(
            settings.REDIS_URL, encoding="utf-8", decode_responses=True
        )
        try:
            await client.ping()
            return client
        except (RedisError, OSError) as exc:
            logger.warning(
                "Redis at %s is unavailable (%s), using in-process limiter storage",
                settings.REDIS_URL,
                exc,
            )
    return FakeAsyncRedis(server=FakeServer(), decode_responses=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Creates the tables and initializes the rate limiter on startup,
    and releases the limiter connection on shutdown.
    """
    settings = get_settings()
    models.Base.metadata.create_all(bind=engine)
    await FastAPILimiter.init(await get_limiter_redis(settings))
    logger.info("Contacts API started")
    yield
    await FastAPILimiter.close()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(title="Contacts API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(users_router)
    app.include_router(contacts_router)
    app.include_router(addresses_router)

    @app.get("/")
    def root():
        """
        Root endpoint for the API.

        Returns:
            dict: JSON message directing users to the Swagger UI.
        """
        return {"msg": "Contacts API. Visit /docs for Swagger UI"}

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000)
