import logging
from contextlib import contextmanager

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker

from portal_backend.core import config
from portal_backend.core.exceptions import StoreUnavailable


logger = logging.getLogger(__name__)

DATABASE_URL = config.validate_database_config()


def build_engine_options(database_url: str) -> dict:
    if database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}

    options = {
        "pool_size": config.DB_POOL_SIZE,
        "max_overflow": config.DB_MAX_OVERFLOW,
        "pool_timeout": config.DB_POOL_TIMEOUT,
        "pool_pre_ping": True,
    }
    if config.DB_SSL_CA:
        options["connect_args"] = {"ssl": {"ca": config.DB_SSL_CA}}
    return options


engine = create_engine(DATABASE_URL, **build_engine_options(DATABASE_URL))

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def store_operation(store, action: str):
    """Turn persistence failures into ``StoreUnavailable`` after rolling back."""
    try:
        yield
    except SQLAlchemyError as exc:
        store.rollback()
        logger.exception("Store failure while %s", action)
        raise StoreUnavailable() from exc


def initialize_database() -> None:
    # Imported for their side effect of registering tables on Base.metadata.
    from portal_backend.models import carousel, competition, user  # noqa: F401

    Base.metadata.create_all(bind=engine)
    with engine.connect() as connection:
        connection.execute(text("SELECT 1"))
    logger.info("Database ready at %s", engine.url.render_as_string(hide_password=True))


def dispose_database() -> None:
    engine.dispose()
