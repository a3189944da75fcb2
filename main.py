import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request

from controllers.image_controller import ImageController
from dal.image_dal import ImageDAL
from routes.image_route import router as image_router
from services.blob_store import BlobStore
from utils.database_init import AsyncDatabaseInitializer
from utils.settings import Settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan manager to initialize:
      - the SQLite database handle (schema created if missing)
      - the upload directory behind the blob store
    and attach them, with the controller that composes them, to `app.state`.
    """
    settings: Settings = app.state.settings or Settings.from_env()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    db_initializer = AsyncDatabaseInitializer(settings.db_path, settings.db_connect_timeout)
    await db_initializer.ensure_database()
    app.state.db_initializer = db_initializer

    blob_store = BlobStore(settings.upload_dir, settings.public_files_prefix)
    await blob_store.ensure_storage_ready()

    app.state.image_controller = ImageController(ImageDAL(db_initializer), blob_store)
    logger.info("Image storage ready (database=%s, uploads=%s)", settings.db_path, settings.upload_dir)

    try:
        yield
    finally:
        app.state.image_controller = None
        app.state.db_initializer = None
        logger.info("Image storage shut down")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application instance.

    Settings are read from the environment at startup when not given.
    """
    app = FastAPI(lifespan=lifespan)
    app.state.settings = settings

    @app.get("/health")
    async def health(request: Request):
        """
        Simple health check that verifies the database answers a query.
        """
        db_initializer = getattr(request.app.state, "db_initializer", None)
        db_available = db_initializer is not None and await db_initializer.ping()
        return {"ok": True, "db_available": db_available}

    # Register application routers
    app.include_router(image_router)

    return app


app = create_app()
