"""Record store for autobiographies and generated stories."""

from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.database import Database

from database import create_document, get_documents, utcnow
from schemas import Autobiography, Story

AUTOBIOGRAPHY = "autobiography"
STORY = "story"


def _object_id(value: str) -> Optional[ObjectId]:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


class RecordStore:
    def __init__(self, db: Database):
        self.db = db

    def _find_by_id(self, collection_name: str, doc_id: str) -> Optional[Dict[str, Any]]:
        oid = _object_id(doc_id)
        if oid is None:
            return None
        return self.db[collection_name].find_one({"_id": oid})

    # Autobiographies

    def get_autobiography(self, record_id: str) -> Optional[Dict[str, Any]]:
        return self._find_by_id(AUTOBIOGRAPHY, record_id)

    def list_autobiographies(self, user_id: str) -> List[Dict[str, Any]]:
        return get_documents(self.db, AUTOBIOGRAPHY, {"user_id": user_id}, sort_field="updated_at")

    def upsert_autobiography(
        self, user_id: str, record: Autobiography, record_id: Optional[str] = None
    ) -> Optional[str]:
        """Insert a new record, or overwrite the owner's record ``record_id``.

        Returns the record id, or None when ``record_id`` does not name a
        record owned by ``user_id``.
        """
        data = record.model_dump(exclude={"created_at", "updated_at"})
        data["user_id"] = user_id

        if record_id is None:
            return create_document(self.db, AUTOBIOGRAPHY, data)

        oid = _object_id(record_id)
        if oid is None:
            return None
        collection = self.db[AUTOBIOGRAPHY]
        existing = collection.find_one({"_id": oid, "user_id": user_id})
        if not existing:
            return None
        data["created_at"] = existing.get("created_at") or utcnow()
        data["updated_at"] = utcnow()
        collection.replace_one({"_id": oid}, data)
        return record_id

    # Stories

    def create_story(self, story: Story) -> str:
        return create_document(self.db, STORY, story.model_dump(exclude={"created_at"}))

    def get_story(self, story_id: str) -> Optional[Dict[str, Any]]:
        return self._find_by_id(STORY, story_id)

    def list_stories(self, user_id: str) -> List[Dict[str, Any]]:
        return get_documents(self.db, STORY, {"user_id": user_id}, sort_field="created_at")
