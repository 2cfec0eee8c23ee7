#!/usr/bin/env python
"""
Create the database tables for the complaint service.
"""

# Standard library imports
import asyncio
import sys

# Third-party imports
from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError

# Local application imports
from samadhan.core.db import async_engine
from samadhan.core.monitoring.logging import get_logger

# Importing the models package registers every table with Base
from samadhan.models import Base

logger = get_logger("samadhan.create_tables")


async def create_tables() -> None:
    """Create all tables in the database"""
    logger.info("Creating database tables...")

    try:
        async with async_engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
            tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
    except SQLAlchemyError as e:
        logger.error(f"Error creating tables: {e}")
        sys.exit(1)
    finally:
        await async_engine.dispose()

    logger.info(f"Tables ready: {', '.join(sorted(tables))}")


if __name__ == "__main__":
    asyncio.run(create_tables())
