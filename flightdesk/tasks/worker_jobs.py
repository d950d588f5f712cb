import logging
from functools import lru_cache

from sqlalchemy.exc import OperationalError, ProgrammingError

from flightdesk.db.session import Storage
from flightdesk.services.email_service import process_pending_emails

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def worker_storage() -> Storage:
    # One handle per worker process, built on first use rather than at import.
    return Storage()


def process_email_queue(limit: int = 50, storage: Storage | None = None) -> dict:
    """Process queued/failed emails (retry send). Run periodically via Celery beat."""
    storage = storage or worker_storage()
    with storage.session_scope() as db:
        try:
            result = process_pending_emails(db, limit=limit)
        except ProgrammingError:
            # DB not migrated yet; don't crash the worker.
            db.rollback()
            return {"skipped": True, "reason": "missing_tables"}
        except OperationalError:
            db.rollback()
            logger.warning("database unavailable; email retry postponed")
            return {"skipped": True, "reason": "storage_unavailable"}
    if result.get("processed"):
        logger.info("email queue: %s", result)
    return result
