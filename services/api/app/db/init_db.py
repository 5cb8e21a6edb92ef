from __future__ import annotations

import logging
import os

from services.api.app.db.database import get_engine
from services.api.app.db.models import Base

logger = logging.getLogger(__name__)


def init_db() -> None:
    if os.getenv("PRINTDROP_DB_AUTO_CREATE", "true").strip().lower() not in {"1", "true", "yes", "y"}:
        return

    engine = get_engine()
    Base.metadata.create_all(bind=engine)
    logger.debug("Database schema ensured at %s", engine.url.render_as_string(hide_password=True))
