"""Engine and session factory for the host role/user store."""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from rolemanager.core.config import get_settings
from rolemanager.db.base import Base

settings = get_settings()

_connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}

engine = create_engine(settings.database_url, connect_args=_connect_args, pool_pre_ping=True)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind=None) -> None:
    """Create the roles and users tables if they do not exist."""
    # Register models on Base.metadata
    import rolemanager.db.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
