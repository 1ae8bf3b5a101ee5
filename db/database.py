from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base
from dotenv import load_dotenv
import os

# Load environment variables from .env file
load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./marketplace.db")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"

engine = create_async_engine(DATABASE_URL, echo=SQL_ECHO)

SessionLocal = async_sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

Base = declarative_base()


async def create_tables(bind=None):
    """Create every mapped table that does not exist yet."""
    # models must be imported so their tables are registered on Base.metadata
    from models import Homestays, Guides, Products, Bookings  # noqa: F401

    async with (bind or engine).begin() as connection:
        await connection.run_sync(Base.metadata.create_all)


async def dispose_engine():
    await engine.dispose()
