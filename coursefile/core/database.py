# coursefile/core/database.py

import os
import ssl
from dotenv import load_dotenv
from typing import AsyncGenerator

from sqlmodel import SQLModel
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine
)
from sqlalchemy.pool import NullPool, StaticPool
from sqlalchemy import text
from loguru import logger

# ----------------------------------------------------
# Load environment
# ----------------------------------------------------
load_dotenv()
DATABASE_URL = os.getenv("DATABASE_URL")

if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL is not set")


# ----------------------------------------------------
# SSL for Supabase Pooler
# ----------------------------------------------------
def make_ssl():
    ctx = ssl.create_default_context()
    if os.getenv("DB_SSL_VERIFY", "true").lower() == "false":
        ctx.check_hostname = False
        ctx.verify_mode = ssl.CERT_NONE
    return ctx


def build_engine(url: str):
    # SQLite is only used for local runs and tests: one shared connection
    if url.startswith("sqlite"):
        logger.info("Configuring Database (SQLite)")
        return create_async_engine(
            url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    # AsyncPG config that works with the Supabase POOLER
    logger.info("Configuring Database (Pooler Mode)")
    return create_async_engine(
        url,
        echo=False,
        connect_args={
            "ssl": make_ssl(),
            "statement_cache_size": 0,            # disable prepared statements
            "prepared_statement_name_func": None, # prevent SQLAlchemy from naming statements
        },
        pool_pre_ping=True,
        poolclass=NullPool,  # required for Pooler
    )


engine = build_engine(DATABASE_URL)


# ----------------------------------------------------
# Sessions
# ----------------------------------------------------
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session


# ----------------------------------------------------
# Create tables
# ----------------------------------------------------
async def init_db():
    # register every table on SQLModel.metadata
    from coursefile.models import academic, audit, course_file, user  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


# ----------------------------------------------------
# Test Connection
# ----------------------------------------------------
async def test_connection():
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
        logger.debug("DB Connection OK")
