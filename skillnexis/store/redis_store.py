# store/redis_store.py
from contextlib import contextmanager
from typing import Dict, Optional
import logging

import redis
from redis.exceptions import LockError, RedisError

from skillnexis.store.base import KeyValueStore, StoreUnavailableError

logger = logging.getLogger(__name__)

LOCK_KEY = "skillnexis_lock"
LOCK_TIMEOUT = 10           # seconds a crashed writer can hold the lock
LOCK_BLOCKING_TIMEOUT = 5   # seconds to wait for another writer


def create_redis_client(url: str) -> redis.Redis:
    # synchronous client; request handlers call the store from a threadpool
    return redis.Redis.from_url(url, encoding="utf-8", decode_responses=True, socket_timeout=5)


class RedisStore(KeyValueStore):
    def __init__(self, client: redis.Redis, prefix: str = ""):
        super().__init__(prefix)
        self._client = client

    def get(self, key: str) -> Optional[str]:
        try:
            return self._client.get(self._k(key))
        except RedisError as e:
            logger.error(f"Redis read failed for {key}: {str(e)}")
            raise StoreUnavailableError(f"Redis read failed: {str(e)}") from e

    def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        try:
            self._client.set(self._k(key), value, ex=ttl or None)
        except RedisError as e:
            logger.error(f"Redis write failed for {key}: {str(e)}")
            raise StoreUnavailableError(f"Redis write failed: {str(e)}") from e

    def delete(self, key: str) -> None:
        try:
            self._client.delete(self._k(key))
        except RedisError as e:
            logger.error(f"Redis delete failed for {key}: {str(e)}")
            raise StoreUnavailableError(f"Redis delete failed: {str(e)}") from e

    def set_many(self, items: Dict[str, str]) -> None:
        if not items:
            return
        try:
            # MULTI/EXEC so readers never observe half of a unit of work
            with self._client.pipeline(transaction=True) as pipe:
                for key, value in items.items():
                    pipe.set(self._k(key), value)
                pipe.execute()
        except RedisError as e:
            logger.error(f"Redis batch write failed: {str(e)}")
            raise StoreUnavailableError(f"Redis batch write failed: {str(e)}") from e

    @contextmanager
    def lock(self):
        lock = self._client.lock(
            self._k(LOCK_KEY), timeout=LOCK_TIMEOUT, blocking_timeout=LOCK_BLOCKING_TIMEOUT
        )
        try:
            acquired = lock.acquire()
        except RedisError as e:
            raise StoreUnavailableError(f"Redis lock failed: {str(e)}") from e
        if not acquired:
            raise StoreUnavailableError("Timed out waiting for the store lock")
        try:
            yield
        finally:
            try:
                lock.release()
            except LockError:
                logger.warning("Store lock expired before release")

    def ping(self) -> bool:
        try:
            return bool(self._client.ping())
        except RedisError as e:
            raise StoreUnavailableError(f"Redis ping failed: {str(e)}") from e

    def close(self) -> None:
        self._client.close()
