# app/main.py
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from app.api import create_app
from app.data.database import Base, engine, init_db
from app.utils.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Initializing database...")
    try:
        init_db()
    except Exception:
        logger.exception(f"Failed to create tables on {engine.url.render_as_string(hide_password=True)}")
        raise
    logger.info(f"Tables ready: {sorted(Base.metadata.tables.keys())}")
    yield


app = create_app(lifespan=lifespan)


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
