"""MongoDB connection and generic document helpers."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pymongo import MongoClient
from pymongo.database import Database

from config import Settings

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def connect(settings: Settings) -> Optional[Database]:
    if not settings.database_configured:
        logger.warning("DATABASE_URL/DATABASE_NAME not set; record storage is disabled")
        return None
    client = MongoClient(settings.database_url)
    return client[settings.database_name]


def create_document(db: Database, collection_name: str, data: Dict[str, Any]) -> str:
    """Insert ``data`` with creation/update timestamps and return the new id."""
    now = utcnow()
    doc = dict(data)
    doc.setdefault("created_at", now)
    doc.setdefault("updated_at", now)
    result = db[collection_name].insert_one(doc)
    return str(result.inserted_id)


def get_documents(
    db: Database,
    collection_name: str,
    filter_dict: Optional[Dict[str, Any]] = None,
    limit: Optional[int] = None,
    sort_field: Optional[str] = None,
) -> List[Dict[str, Any]]:
    cursor = db[collection_name].find(filter_dict or {})
    if sort_field:
        cursor = cursor.sort(sort_field, -1)
    if limit:
        cursor = cursor.limit(limit)
    return list(cursor)
