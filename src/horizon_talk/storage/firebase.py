"""Firebase app initialisation for the Realtime Database."""

from pathlib import Path

import firebase_admin
import structlog
from firebase_admin import credentials

from horizon_talk.config import Settings

logger = structlog.get_logger()


def init_firebase(settings: Settings) -> bool:
    """Initialise the default Firebase app once per process.

    Returns:
        True when the app is ready, False when configuration is missing.
        Persistence reads then return defaults and writes fail.
    """
    try:
        firebase_admin.get_app()
        return True
    except ValueError:
        pass

    if not settings.firebase_database_url:
        logger.warning("firebase_not_configured", reason="FIREBASE_DATABASE_URL not set")
        return False

    options = {"databaseURL": settings.firebase_database_url}
    creds_path = settings.firebase_credentials_path
    try:
        if creds_path:
            if not Path(creds_path).exists():
                logger.error("firebase_credentials_missing", path=creds_path)
                return False
            firebase_admin.initialize_app(credentials.Certificate(creds_path), options)
        else:
            # Application default credentials (e.g. on Cloud Run)
            firebase_admin.initialize_app(options=options)
    except Exception:
        logger.exception("firebase_init_failed")
        return False

    logger.info("firebase_initialized", database_url=settings.firebase_database_url)
    return True
