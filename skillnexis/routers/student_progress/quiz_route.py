# routers/quiz_route.py
from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from skillnexis.auth.dependencies import get_current_user
from skillnexis.deps import get_data_manager
from skillnexis.repos.admin_data import AdminDataManager
from skillnexis.schemas.course_schema import QuizResultOut, QuizSubmitIn, StudentQuizOut
from skillnexis.schemas.progress_schema import AssessmentIn, CourseProgressOut
from skillnexis.services import progress_service

router = APIRouter(tags=["quiz"])

@router.get("/quiz/{slug}", response_model=StudentQuizOut)
async def get_quiz(slug: str,
                   manager: AdminDataManager = Depends(get_data_manager),
                   user=Depends(get_current_user)):
    return await run_in_threadpool(progress_service.quiz_for_student, manager, user_id=user["id"], slug=slug)

# No attempt limit: a failed quiz can be resubmitted straight away
@router.post("/quiz/{slug}/submit", response_model=QuizResultOut)
async def submit_quiz(slug: str, payload: QuizSubmitIn,
                      manager: AdminDataManager = Depends(get_data_manager),
                      user=Depends(get_current_user)):
    return await run_in_threadpool(
        progress_service.submit_quiz, manager, user_id=user["id"], slug=slug, answers=payload.answers
    )

@router.post("/assessments/{slug}", response_model=CourseProgressOut)
async def submit_assessment(slug: str, payload: AssessmentIn,
                            manager: AdminDataManager = Depends(get_data_manager),
                            user=Depends(get_current_user)):
    return await run_in_threadpool(
        progress_service.submit_assessment, manager, user_id=user["id"], slug=slug, recording=payload.recording
    )
