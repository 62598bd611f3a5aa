# routers/certificates_route.py
from typing import List

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from skillnexis.auth.dependencies import get_current_user
from skillnexis.deps import get_data_manager
from skillnexis.repos.admin_data import AdminDataManager
from skillnexis.schemas.progress_schema import CertificateOut
from skillnexis.services import progress_service

router = APIRouter(prefix="/certificates", tags=["certificates"])

@router.get("", response_model=List[CertificateOut])
async def list_certificates(manager: AdminDataManager = Depends(get_data_manager),
                            user=Depends(get_current_user)):
    return await run_in_threadpool(progress_service.certificates, manager, user_id=user["id"])

@router.get("/{slug}", response_model=CertificateOut)
async def get_certificate(slug: str,
                          manager: AdminDataManager = Depends(get_data_manager),
                          user=Depends(get_current_user)):
    return await run_in_threadpool(progress_service.certificate, manager, user_id=user["id"], slug=slug)
