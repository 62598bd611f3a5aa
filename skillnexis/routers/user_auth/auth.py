# routers/auth.py
from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from skillnexis.auth.dependencies import get_current_user, get_token_payload
from skillnexis.deps import get_data_manager, get_store
from skillnexis.repos.admin_data import AdminDataManager
from skillnexis.schemas.auth_schemas import LogoutOut, SessionOut, SessionUser, UserLogin, UserRegister
from skillnexis.services import auth_service
from skillnexis.store.base import KeyValueStore

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/register", response_model=SessionOut, status_code=201)
async def register_user(payload: UserRegister,
                        manager: AdminDataManager = Depends(get_data_manager),
                        store: KeyValueStore = Depends(get_store)):
    return await run_in_threadpool(
        auth_service.register, manager, store, payload.name, payload.email, payload.password
    )

@router.post("/login", response_model=SessionOut)
async def login(payload: UserLogin,
                manager: AdminDataManager = Depends(get_data_manager),
                store: KeyValueStore = Depends(get_store)):
    return await run_in_threadpool(auth_service.login, manager, store, payload.email, payload.password)

@router.get("/me", response_model=SessionUser)
async def me(user=Depends(get_current_user)):
    return user

@router.delete("/logout", response_model=LogoutOut)
async def logout(payload: dict = Depends(get_token_payload), store: KeyValueStore = Depends(get_store)):
    return await run_in_threadpool(auth_service.logout, store, payload["jti"])
