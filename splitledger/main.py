import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from splitledger.api.error_handlers import register_error_handlers
from splitledger.api.v1.api import api_router
from splitledger.core.config import settings
from splitledger.core.observability import setup_logging
from splitledger.db.mongo import close_mongo_connection, connect_to_mongo

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    await connect_to_mongo()
    logger.info("%s started", settings.PROJECT_NAME)
    yield
    await close_mongo_connection()


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.PROJECT_VERSION,
    description=settings.DESCRIPTION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

@app.get("/")
async def root():
    return {"message": f"Welcome to {settings.PROJECT_NAME}"}

app.include_router(api_router, prefix=settings.API_V1_STR)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("splitledger.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
