"""
Chat Memory Service - Main application entry point.

FastAPI application for multi-model chat with persistent, summarized memory.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.v1.routers import chat_router, health_router
from .core.config import AppConfig, logger
from .core.dependencies import close_llm_provider
from .infrastructure.persistence.database import close_db, init_database, init_db


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Starting Chat Memory Service...")
    logger.info(f"Version: {AppConfig.VERSION}")

    try:
        init_database(AppConfig.DATABASE_URL)
        await init_db()
        logger.info("Database initialized")
    except Exception as e:
        logger.error(f"Failed to initialize: {e}")
        raise

    yield

    logger.info("Shutting down Chat Memory Service...")
    await close_llm_provider()
    await close_db()


app = FastAPI(
    title="Chat Memory Service",
    version=AppConfig.VERSION,
    description="Multi-model chat with conversation memory and history summarization",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(chat_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "chat_memory.main:app",
        host="0.0.0.0",
        port=8080,
        log_level=AppConfig.LOG_LEVEL.lower(),
    )
