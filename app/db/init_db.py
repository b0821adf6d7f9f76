"""
Database initialization.

Creates all tables directly from the SQLModel metadata.  Alembic remains
the way to evolve an existing database.
"""

import logging

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel

logger = logging.getLogger(__name__)


def init_db(engine: Engine | None = None) -> None:
    """
    Initialize database schema.

    Args:
        engine: Engine to create tables on.  Defaults to the application
            engine from :mod:`app.db.session`.
    """
    # Import all models so SQLModel.metadata has them
    import app.db.base  # noqa: F401

    if engine is None:
        from app.db.session import engine

    logger.info("Creating database tables on %s", engine.url.render_as_string(hide_password=True))
    SQLModel.metadata.create_all(engine)
    logger.info("Tables created: %s", ", ".join(sorted(SQLModel.metadata.tables)))


if __name__ == "__main__":
    init_db()
