# auth/dependencies.py
from fastapi import Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool
from fastapi.security import OAuth2PasswordBearer

from skillnexis.auth.jwt import decode_token
from skillnexis.deps import get_data_manager, get_store
from skillnexis.repos.admin_data import AdminDataManager
from skillnexis.services import auth_service
from skillnexis.store.base import KeyValueStore

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")

async def get_token_payload(token: str = Depends(oauth2_scheme)) -> dict:
    try:
        return decode_token(token)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))

async def get_current_user(
    payload: dict = Depends(get_token_payload),
    manager: AdminDataManager = Depends(get_data_manager),
    store: KeyValueStore = Depends(get_store),
):
    try:
        return await run_in_threadpool(auth_service.current_user, manager, store, payload["jti"])
    except auth_service.SessionExpiredError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))

def require_role(*roles: str):
    async def role_checker(user=Depends(get_current_user)):
        if user["role"] not in roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return user
    return role_checker
