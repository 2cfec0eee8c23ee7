# Standard library imports
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import cast
from uuid import UUID

# Third-party imports
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute
from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError

# Local application imports
from samadhan.api import router as api_router
from samadhan.api.internal.utils.exceptions import register_exception_handlers
from samadhan.core.db import AsyncSessionLocal
from samadhan.core.monitoring import get_logger, setup_sentry
from samadhan.models.auth.permissions import UserRole
from samadhan.models.auth.user import User
from samadhan.settings import settings

# Set up the main application logger
logger = get_logger("samadhan")

if setup_sentry():
    logger.info(f"Sentry initialised in {settings.ENVIRONMENT} environment")


async def create_default_admin_user() -> UUID:
    async with AsyncSessionLocal() as db:
        result = await db.execute(select(User).where(User.email == settings.ADMIN_EMAIL))
        existing_admin = result.scalar_one_or_none()

        if existing_admin is not None:
            logger.info("Admin user already exists.")
            return cast(UUID, existing_admin.id)

        admin_user = User(
            email=settings.ADMIN_EMAIL,
            name=settings.ADMIN_NAME,
            role=UserRole.ADMIN,
            is_active=True,
            is_email_verified=True,
        )
        db.add(admin_user)
        await db.commit()
        logger.info("Admin user created.")
        return cast(UUID, admin_user.id)


def custom_generate_unique_id(route: APIRoute) -> str:
    # Handle routes without tags
    if route.tags and len(route.tags) > 0:
        return f"{route.tags[0]}-{route.name}"
    else:
        return route.name or "unnamed_route"


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    logger.info("Starting up FastAPI application")

    try:
        admin_id = await create_default_admin_user()
        logger.info(f"Admin user ready with ID: {admin_id}")
    except SQLAlchemyError as e:
        logger.error(f"Failed to create admin user: {e}")

    yield

    logger.info("Shutting down FastAPI application")


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="1.0.0",
        description="Civic complaint reporting, triage and resolution API",
        openapi_url=f"{settings.API_V1_STR}/openapi.json" if settings.ENVIRONMENT != "production" else None,
        docs_url=f"{settings.API_V1_STR}/docs" if settings.ENVIRONMENT != "production" else None,
        redoc_url=f"{settings.API_V1_STR}/redoc" if settings.ENVIRONMENT != "production" else None,
        generate_unique_id_function=custom_generate_unique_id,
        lifespan=lifespan,
    )

    if settings.all_cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.all_cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)

    @app.get("/health")
    async def health_check():
        try:
            async with AsyncSessionLocal() as db:
                await db.execute(text("SELECT 1"))
            database = "connected"
        except SQLAlchemyError as e:
            logger.error(f"Health check could not reach the database: {e}")
            database = "unavailable"
        return {"status": "healthy", "version": "1.0.0", "database": database}

    app.include_router(api_router)

    return app


# Create the app instance
app = create_app()
