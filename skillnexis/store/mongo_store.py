# store/mongo_store.py
import threading
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional
import logging

from pymongo import MongoClient, ReplaceOne
from pymongo.database import Database
from pymongo.errors import PyMongoError

from skillnexis.store.base import KeyValueStore, StoreUnavailableError

logger = logging.getLogger(__name__)


def create_mongo_client(uri: str) -> MongoClient:
    # synchronous PyMongo client (use run_in_threadpool for blocking calls)
    return MongoClient(uri, maxPoolSize=100, serverSelectionTimeoutMS=5000)

def _utcnow() -> datetime:
    # PyMongo hands back naive UTC datetimes unless tz_aware is set
    return datetime.now(timezone.utc).replace(tzinfo=None)


class MongoStore(KeyValueStore):
    """
    One document per key: {"_id": key, "value": json_text}. Keys written
    with a ttl also carry "expiresAt", swept by a TTL index.

    The lock is process-local; run a single worker when using this backend.
    """

    def __init__(self, db: Database, prefix: str = "", collection: str = "kv"):
        super().__init__(prefix)
        self._db = db
        self._col = db[collection]
        self._lock = threading.RLock()

    def get(self, key: str) -> Optional[str]:
        # the TTL monitor runs about once a minute; hide anything already due
        live = {"_id": self._k(key), "$or": [{"expiresAt": {"$exists": False}}, {"expiresAt": {"$gt": _utcnow()}}]}
        try:
            doc = self._col.find_one(live)
        except PyMongoError as e:
            logger.error(f"MongoDB read failed for {key}: {str(e)}")
            raise StoreUnavailableError(f"MongoDB read failed: {str(e)}") from e
        return doc.get("value") if doc else None

    def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        doc = {"value": value}
        if ttl:
            doc["expiresAt"] = _utcnow() + timedelta(seconds=ttl)
        try:
            self._col.replace_one({"_id": self._k(key)}, doc, upsert=True)
        except PyMongoError as e:
            logger.error(f"MongoDB write failed for {key}: {str(e)}")
            raise StoreUnavailableError(f"MongoDB write failed: {str(e)}") from e

    def delete(self, key: str) -> None:
        try:
            self._col.delete_one({"_id": self._k(key)})
        except PyMongoError as e:
            logger.error(f"MongoDB delete failed for {key}: {str(e)}")
            raise StoreUnavailableError(f"MongoDB delete failed: {str(e)}") from e

    def set_many(self, items: Dict[str, str]) -> None:
        if not items:
            return
        ops = [ReplaceOne({"_id": self._k(k)}, {"value": v}, upsert=True) for k, v in items.items()]
        try:
            self._col.bulk_write(ops, ordered=True)
        except PyMongoError as e:
            logger.error(f"MongoDB batch write failed: {str(e)}")
            raise StoreUnavailableError(f"MongoDB batch write failed: {str(e)}") from e

    def lock(self):
        return self._lock

    def ensure_indexes(self) -> None:
        try:
            self._col.create_index("expiresAt", expireAfterSeconds=0)
        except PyMongoError as e:
            raise StoreUnavailableError(f"MongoDB index creation failed: {str(e)}") from e

    def ping(self) -> bool:
        try:
            self._db.command("ping")
            return True
        except PyMongoError as e:
            raise StoreUnavailableError(f"MongoDB ping failed: {str(e)}") from e

    def close(self) -> None:
        self._db.client.close()
