import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from config import DATABASE_URL, LOG_LEVEL
import logging

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
logger = logging.getLogger(__name__)

# Only use connect_args if we are using SQLite
engine_args = {}
if DATABASE_URL.startswith("sqlite"):
    engine_args["connect_args"] = {"check_same_thread": False}
    # In-memory databases live per connection, so every session must share one
    if DATABASE_URL in ("sqlite://", "sqlite:///:memory:"):
        engine_args["poolclass"] = StaticPool

try:
    engine = create_engine(
        DATABASE_URL,
        **engine_args,
        echo=False,
    )
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
except Exception as e:
    logger.error(f"Failed to create engine: {e}")
    raise e

Base = declarative_base()


def get_db():
    """FastAPI dependency — yields a database session and closes it after use."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _sqlite_directory() -> str | None:
    """Directory holding the SQLite file, or None for in-memory/non-SQLite URLs."""
    if not DATABASE_URL.startswith("sqlite:///"):
        return None
    path = DATABASE_URL[len("sqlite:///"):]
    if not path or path == ":memory:":
        return None
    return os.path.dirname(path) or None


def init_db():
    """Create the SQLite directory if it doesn't exist, then create all tables."""
    directory = _sqlite_directory()
    if directory:
        os.makedirs(directory, exist_ok=True)

    # Import all models so they register with Base.metadata
    import models  # noqa: F401

    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database initialized successfully.")
    except Exception as e:
        logger.error(f"Error during database initialization: {e}")
        raise
