from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from routes import search, bookings
from db.database import create_tables, dispose_engine
import logging
import os

APP_VERSION = "1.0.0"

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    logger.info("Starting marketplace API...")
    await create_tables()
    logger.info("Database tables created/verified")

    yield

    logger.info("Shutting down marketplace API...")
    await dispose_engine()


app = FastAPI(
    title="Homestays, Guides & Products Marketplace API",
    description="""
    Search across homestays, local guides and products, and book
    homestays or guides.
    """,
    version=APP_VERSION,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(search.router)
app.include_router(bookings.router)


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "version": APP_VERSION
    }
