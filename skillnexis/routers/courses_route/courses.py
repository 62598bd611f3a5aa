from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.concurrency import run_in_threadpool
from typing import List, Optional

from skillnexis.auth.dependencies import get_current_user
from skillnexis.deps import get_data_manager
from skillnexis.repos.admin_data import AdminDataManager
from skillnexis.schemas.course_schema import CourseOut
from skillnexis.schemas.progress_schema import CourseProgressOut
from skillnexis.services import progress_service

router = APIRouter(prefix="/courses", tags=["courses"])

# Public catalogue, optionally filtered
@router.get("", response_model=List[CourseOut])
async def list_courses(
    search: Optional[str] = Query(None, description="Case-insensitive match on title or description"),
    category: Optional[str] = None,
    manager: AdminDataManager = Depends(get_data_manager),
):
    courses = await run_in_threadpool(manager.get_courses)
    if category:
        courses = [c for c in courses if c.get("category") == category]
    if search:
        needle = search.lower()
        courses = [
            c for c in courses
            if needle in (c.get("title") or "").lower() or needle in (c.get("description") or "").lower()
        ]
    return courses

@router.get("/{slug}", response_model=CourseOut)
async def get_course(slug: str, manager: AdminDataManager = Depends(get_data_manager)):
    doc = await run_in_threadpool(manager.get_course_by_slug, slug)
    if not doc:
        raise HTTPException(status_code=404, detail="Course not found")
    return doc

# Enrollment is idempotent: enrolling twice returns the same state
@router.post("/{slug}/enroll", response_model=CourseProgressOut)
async def enroll(slug: str,
                 manager: AdminDataManager = Depends(get_data_manager),
                 user=Depends(get_current_user)):
    return await run_in_threadpool(progress_service.enroll, manager, user_id=user["id"], slug=slug)
