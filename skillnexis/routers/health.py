from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool
from datetime import datetime, timezone
import logging

from skillnexis.config import settings
from skillnexis.deps import get_store
from skillnexis.store.base import KeyValueStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"], prefix="/api/v1")

@router.get("/health", summary="Health Check", description="Check the health status of the application and its store backend")
async def health_check(store: KeyValueStore = Depends(get_store)):
    store_status = "disconnected"
    store_error = None

    try:
        await run_in_threadpool(store.ping)
        store_status = "connected"
    except ConnectionError as e:
        logger.warning(f"Store connection failed: {str(e)}")
        store_error = "Connection failed"
    except Exception as e:
        logger.error(f"Store health check error: {str(e)}")
        store_error = "Health check failed"

    response = {
        "status": "healthy" if store_status == "connected" else "unhealthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "services": {
            "store": {
                "backend": settings.STORE_BACKEND,
                "status": store_status,
                "error": store_error
            }
        }
    }

    if store_status != "connected":
        raise HTTPException(status_code=503, detail=response)

    return response
