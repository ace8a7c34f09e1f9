import logging
import os
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler

from fastapi import FastAPI

from .config import settings
from .controller import Trainer
from .database import default_db_path, init_db
from .log_handler import SQLiteHandler
from .router import router
from .storage import ConfigStore, KeyValueStore, ProgressStore
from .vocabulary import VocabularyManager


# --- Logging Setup ---
def setup_logging():
    logger = logging.getLogger("vocabtrainer")
    logger.setLevel(logging.INFO)
    # create_app may run more than once per process (tests, reloads)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if not os.path.exists(settings.LOG_DIR):
        os.makedirs(settings.LOG_DIR, exist_ok=True)
    log_path = os.path.join(settings.LOG_DIR, settings.LOG_FILE)
    file_handler = RotatingFileHandler(log_path, maxBytes=5_000_000, backupCount=3)
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
    )
    logger.addHandler(file_handler)

    if settings.LOG_TO_DB:
        db_handler = SQLiteHandler(default_db_path())
        db_handler.setLevel(logging.WARNING)
        db_handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(db_handler)
    # Also configure root logger to see logs from other libraries
    logging.basicConfig(level=logging.INFO)


def build_trainer() -> Trainer:
    db_path = default_db_path()
    init_db(db_path)
    kv = KeyValueStore(db_path)
    records = VocabularyManager(
        settings.WORDS_FILE,
        id_column=settings.ID_COLUMN,
        prompt_column=settings.PROMPT_COLUMN,
        target_column=settings.TARGET_COLUMN,
    ).read_records()
    return Trainer(records, ProgressStore(kv), ConfigStore(kv))


# --- Lifecycle ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.trainer = build_trainer()
    yield


# --- App Factory ---
def create_app() -> FastAPI:
    init_db()
    setup_logging()
    app = FastAPI(
        title=settings.PROJECT_NAME,
        debug=settings.DEBUG,
        lifespan=lifespan,
        root_path=settings.ROOT_PATH,
    )

    app.include_router(router)

    return app
