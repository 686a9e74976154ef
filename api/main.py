# api/main.py
from dotenv import load_dotenv
import os

env = os.getenv("APP_ENV", "local")
if env == "local":
    load_dotenv(".env.local")
else:
    load_dotenv(".env")

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from contextlib import asynccontextmanager
import logging
from database.db import init_db
from fastapi.middleware.cors import CORSMiddleware

from api.errors import validation_exception_handler
from api.routers import (
    health,
    researchers,
    topics,
    papers,
    statistics,
    files,
)

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)
logger.info(f"Loaded environment: {env}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Research Registry API, initializing DB")
    try:
        init_db()
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}", exc_info=True)
        raise
    yield
    logger.info("Shutting down Research Registry API")


app = FastAPI(
    title="Research Registry API",
    version="1.0.0",
    description="Researchers, research topics and research papers with PDF attachments.",
    lifespan=lifespan
)

app.add_exception_handler(RequestValidationError, validation_exception_handler)

# CORS Configuration
origins = []
if env == "local":
    origins = ["http://localhost:3000", "http://localhost:5173"]  # Common dev ports
else:
    # Production origins from environment variable
    origins_str = os.getenv("ALLOWED_ORIGINS", "")
    origins = [origin.strip() for origin in origins_str.split(",") if origin.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(health.router)
app.include_router(researchers.router, prefix="/api", tags=["Researchers"])
app.include_router(topics.router, prefix="/api", tags=["Topics"])
app.include_router(papers.router, prefix="/api", tags=["Research Papers"])
app.include_router(statistics.router, prefix="/api", tags=["Statistics"])
app.include_router(files.router, prefix="/api", tags=["Files"])


@app.get("/")
async def root():
    return {"message": "Research Registry API running"}
