# routers/progress_route.py
from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from skillnexis.auth.dependencies import get_current_user
from skillnexis.deps import get_data_manager
from skillnexis.repos.admin_data import AdminDataManager
from skillnexis.schemas.progress_schema import CourseProgressOut, DashboardOut
from skillnexis.services import progress_service

router = APIRouter(prefix="/progress", tags=["progress"])

@router.get("/dashboard", response_model=DashboardOut)
async def progress_dashboard(manager: AdminDataManager = Depends(get_data_manager),
                             user=Depends(get_current_user)):
    return await run_in_threadpool(progress_service.dashboard, manager, user_id=user["id"])

@router.get("/{slug}", response_model=CourseProgressOut)
async def course_progress(slug: str,
                          manager: AdminDataManager = Depends(get_data_manager),
                          user=Depends(get_current_user)):
    return await run_in_threadpool(progress_service.course_progress, manager, user_id=user["id"], slug=slug)

# Called when the embedded video reports load/progress
@router.post("/{slug}/video", response_model=CourseProgressOut)
async def video_watched(slug: str,
                        manager: AdminDataManager = Depends(get_data_manager),
                        user=Depends(get_current_user)):
    return await run_in_threadpool(progress_service.mark_video_watched, manager, user_id=user["id"], slug=slug)
