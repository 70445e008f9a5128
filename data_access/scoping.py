# data_access/scoping.py
import logging
from contextlib import contextmanager
from typing import Any, Dict, List

from pymongo.errors import PyMongoError

from core.errors import QueryError

logger = logging.getLogger(__name__)


def require_owner(owner_id: str) -> str:
    owner_id = (owner_id or "").strip()
    if not owner_id:
        raise ValueError("owner id is required for every query")
    return owner_id

def ensure_scoped(docs: List[Dict[str, Any]], owner_id: str, what: str) -> List[Dict[str, Any]]:
    """Refuse result sets that contain rows of another owner."""
    for doc in docs:
        if doc.get("user") != owner_id:
            logger.warning("un-scoped result set", extra={"collection": what, "owner": owner_id})
            raise QueryError(f"{what}: result set contains rows outside the requested owner")
    return docs

@contextmanager
def query_errors(action: str):
    """Wrap driver failures into QueryError with a readable message."""
    try:
        yield
    except PyMongoError as e:
        logger.warning("%s failed", action, extra={"error": str(e)})
        raise QueryError(f"{action} failed: {e}") from e
