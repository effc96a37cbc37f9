# db/database.py
import logging
from contextlib import contextmanager

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import sessionmaker, scoped_session
from config.config import Config

logger = logging.getLogger(__name__)

# Create engine
engine_args = {}
if Config.DATABASE_URL.startswith("sqlite"):
    engine_args["connect_args"] = {"check_same_thread": False}

engine = create_engine(Config.DATABASE_URL, echo=False, **engine_args)

# Session
SessionLocal = scoped_session(
    sessionmaker(autocommit=False, autoflush=False, bind=engine)
)


def _load_models():
    # importing the modules registers every table on Base.metadata
    from models.user import Base, User  # noqa: F401
    from models.chef_application import ChefApplication  # noqa: F401
    from models.chef import Chef  # noqa: F401
    return Base


def init_db():
    """Create all tables if not exist (basic version)."""
    Base = _load_models()
    Base.metadata.create_all(bind=engine)


def drop_db():
    Base = _load_models()
    Base.metadata.drop_all(bind=engine)


@contextmanager
def session_scope():
    """
    One unit of work: commits when the block exits cleanly,
    rolls back on any exception and always closes the session.
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# -------------------------------------------------------------
#           SAFE AUTO-MIGRATION (CREATE / PATCH)
# -------------------------------------------------------------
def auto_migrate():
    """
    Auto-creates missing tables AND auto-adds missing columns
    for every mapped model. Does NOT delete data.
    """
    Base = _load_models()

    # 1) Ensure tables exist
    Base.metadata.create_all(bind=engine)

    inspector = inspect(engine)

    # 2) Add missing columns inside a transaction (engine.begin ensures commit)
    with engine.begin() as conn:
        for table in Base.metadata.sorted_tables:
            existing_cols = {col["name"] for col in inspector.get_columns(table.name)}
            for column in table.columns:
                if column.name in existing_cols:
                    continue
                col_type = column.type.compile(dialect=engine.dialect)
                logger.warning("[AUTO-MIGRATE] Adding missing column: %s.%s", table.name, column.name)
                conn.execute(text(f"ALTER TABLE {table.name} ADD COLUMN {column.name} {col_type}"))

    logger.info("[AUTO-MIGRATE] Schema verified/updated.")
