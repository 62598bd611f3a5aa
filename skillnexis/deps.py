from fastapi import Request
import httpx

from skillnexis.config import Settings
from skillnexis.repos.admin_data import AdminDataManager
from skillnexis.store.base import KeyValueStore
from skillnexis.store.memory import InMemoryStore


def create_store(settings: Settings) -> KeyValueStore:
    if settings.STORE_BACKEND == "redis":
        from skillnexis.store.redis_store import RedisStore, create_redis_client
        if not settings.REDIS_URL:
            raise ValueError("REDIS_URL is required for the redis store")
        return RedisStore(create_redis_client(settings.REDIS_URL), prefix=settings.STORE_PREFIX)
    if settings.STORE_BACKEND == "mongo":
        from skillnexis.store.mongo_store import MongoStore, create_mongo_client
        if not settings.MONGO_URI:
            raise ValueError("MONGO_URI is required for the mongo store")
        client = create_mongo_client(settings.MONGO_URI)
        return MongoStore(client.get_default_database(), prefix=settings.STORE_PREFIX)
    return InMemoryStore(prefix=settings.STORE_PREFIX)


def get_store(request: Request) -> KeyValueStore:
    return request.app.state.store

def get_data_manager(request: Request) -> AdminDataManager:
    return request.app.state.data_manager

def get_mail_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.mail_client
