"""
FastAPI Dependencies

Provides dependency injection for database sessions and the image store.
"""
from functools import lru_cache
from typing import Generator

from sqlalchemy.orm import Session

from src.estatesite.db.session import SessionLocal
from src.estatesite.services.media import MediaStore, build_media_store


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Rolls back if the request handler raised; handlers commit their own writes.

    Yields:
        SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@lru_cache(maxsize=1)
def get_media_store() -> MediaStore:
    """
    Image store dependency.

    Returns:
        Process-wide Cloudinary media store
    """
    return build_media_store()
