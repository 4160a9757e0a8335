"""Initialize database tables."""
import logging
from typing import Optional

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel

# Imported for table registration on SQLModel.metadata
from mediator_api import models  # noqa: F401
from mediator_api.db.config import engine as default_engine

logger = logging.getLogger(__name__)


def init_db(bind: Optional[Engine] = None):
    """Create all tables that do not exist yet."""
    logger.info("[DB INIT] Creating all tables...")
    SQLModel.metadata.create_all(bind or default_engine)
    logger.info("[DB INIT] Tables created successfully.")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
