# routers/admin.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool

from skillnexis.auth.dependencies import require_role
from skillnexis.deps import get_data_manager, get_store
from skillnexis.repos.admin_data import AdminDataManager
from skillnexis.schemas.auth_schemas import UserCreate, UserOut, UserUpdate
from skillnexis.schemas.course_schema import (
    CourseCreate, CourseOut, CourseUpdate, QuizOut, QuizUpdate, QuizUpsert, StatsOut,
)
from skillnexis.services import auth_service
from skillnexis.store.base import KeyValueStore

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_role("admin"))])


def _dump(payload, *, partial: bool) -> dict:
    # an explicit null on a patch means "leave as is", never "store null"
    if partial:
        return payload.model_dump(by_alias=True, exclude_unset=True, exclude_none=True)
    return payload.model_dump(by_alias=True, exclude_none=True)


# ---------------------------
# Stats
# ---------------------------

@router.get("/stats", response_model=StatsOut)
async def get_stats(manager: AdminDataManager = Depends(get_data_manager)):
    return await run_in_threadpool(manager.get_stats)

@router.post("/stats/refresh", response_model=StatsOut)
async def refresh_stats(manager: AdminDataManager = Depends(get_data_manager)):
    return await run_in_threadpool(manager.update_stats)


# ---------------------------
# Users
# ---------------------------

@router.get("/users", response_model=List[UserOut])
async def list_users(manager: AdminDataManager = Depends(get_data_manager)):
    return await run_in_threadpool(manager.get_users)

@router.post("/users", response_model=UserOut, status_code=status.HTTP_201_CREATED)
async def create_user(payload: UserCreate, manager: AdminDataManager = Depends(get_data_manager)):
    data = _dump(payload, partial=False)
    data["email"] = data["email"].strip().lower()
    if await run_in_threadpool(manager.get_user_by_email, data["email"]):
        raise HTTPException(status_code=409, detail="An account with this email already exists")
    return await run_in_threadpool(manager.add_user, data)

@router.patch("/users/{user_id}", response_model=UserOut)
async def update_user(user_id: str, payload: UserUpdate, manager: AdminDataManager = Depends(get_data_manager)):
    updated = await run_in_threadpool(manager.update_user, user_id, _dump(payload, partial=True))
    if not updated:
        raise HTTPException(status_code=404, detail="User not found")
    return updated

@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: str,
                      manager: AdminDataManager = Depends(get_data_manager),
                      store: KeyValueStore = Depends(get_store)):
    await run_in_threadpool(manager.delete_user, user_id)
    # otherwise a live session would restore the record on its next request
    await run_in_threadpool(auth_service.end_user_sessions, store, user_id)

@router.post("/users/{user_id}/courses/{course_id}/enroll", response_model=UserOut)
async def enroll_user(user_id: str, course_id: str, manager: AdminDataManager = Depends(get_data_manager)):
    user = await run_in_threadpool(manager.enroll_user_in_course, user_id, course_id)
    if not user:
        raise HTTPException(status_code=404, detail="User or course not found")
    return user

@router.post("/users/{user_id}/courses/{course_id}/complete", response_model=UserOut)
async def complete_user_course(user_id: str, course_id: str, manager: AdminDataManager = Depends(get_data_manager)):
    user = await run_in_threadpool(manager.complete_course, user_id, course_id)
    if not user:
        raise HTTPException(status_code=404, detail="User or course not found")
    return user


# ---------------------------
# Courses
# ---------------------------

@router.get("/courses", response_model=List[CourseOut])
async def list_courses(manager: AdminDataManager = Depends(get_data_manager)):
    return await run_in_threadpool(manager.get_courses)

@router.post("/courses", response_model=CourseOut, status_code=status.HTTP_201_CREATED)
async def create_course(payload: CourseCreate, manager: AdminDataManager = Depends(get_data_manager)):
    return await run_in_threadpool(manager.add_course, _dump(payload, partial=False))

@router.patch("/courses/{course_id}", response_model=CourseOut)
async def update_course(course_id: str, payload: CourseUpdate, manager: AdminDataManager = Depends(get_data_manager)):
    updated = await run_in_threadpool(manager.update_course, course_id, _dump(payload, partial=True))
    if not updated:
        raise HTTPException(status_code=404, detail="Course not found")
    return updated

# Also removes the course's quiz
@router.delete("/courses/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_course(course_id: str, manager: AdminDataManager = Depends(get_data_manager)):
    await run_in_threadpool(manager.delete_course, course_id)


# ---------------------------
# Quizzes
# ---------------------------

@router.get("/quizzes", response_model=List[QuizOut])
async def list_quizzes(manager: AdminDataManager = Depends(get_data_manager)):
    return await run_in_threadpool(manager.get_quizzes)

@router.get("/quizzes/{slug}", response_model=QuizOut)
async def get_quiz(slug: str, manager: AdminDataManager = Depends(get_data_manager)):
    quiz = await run_in_threadpool(manager.get_quiz, slug)
    if not quiz:
        raise HTTPException(status_code=404, detail="Quiz not found")
    return quiz

# Upsert: replaces any existing quiz for the course
@router.put("/quizzes/{slug}", response_model=QuizOut)
async def save_quiz(slug: str, payload: QuizUpsert, manager: AdminDataManager = Depends(get_data_manager)):
    if not await run_in_threadpool(manager.get_course_by_slug, slug):
        raise HTTPException(status_code=404, detail="Course not found")
    return await run_in_threadpool(manager.add_quiz, {"courseSlug": slug, **_dump(payload, partial=False)})

@router.patch("/quizzes/{slug}", response_model=QuizOut)
async def update_quiz(slug: str, payload: QuizUpdate, manager: AdminDataManager = Depends(get_data_manager)):
    updated = await run_in_threadpool(manager.update_quiz, slug, _dump(payload, partial=True))
    if not updated:
        raise HTTPException(status_code=404, detail="Quiz not found")
    return updated

@router.delete("/quizzes/{slug}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_quiz(slug: str, manager: AdminDataManager = Depends(get_data_manager)):
    await run_in_threadpool(manager.delete_quiz, slug)
