# services/progress_service.py
"""
Per-(user, course) progress state machine.

    NOT_ENROLLED -> ENROLLED (0) -> VIDEO_DONE (33) -> QUIZ_PASSED (66) -> COMPLETED (100)

Percentages only ever go up. The quiz unlocks at 33 and the assessment at
66; asking for a locked step raises ProgressLockedError carrying the page
the caller should send the student back to.
"""
import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from skillnexis.repos.admin_data import AdminDataManager
from skillnexis.repos.stats import js_round

logger = logging.getLogger(__name__)

VIDEO_PROGRESS = 33
QUIZ_PROGRESS = 66
COMPLETE_PROGRESS = 100
PASSING_SCORE = 80
QUIZ_TIME_LIMIT_SECONDS = 600


class ProgressStage(str, Enum):
    NOT_ENROLLED = "not_enrolled"
    ENROLLED = "enrolled"
    VIDEO_DONE = "video_done"
    QUIZ_PASSED = "quiz_passed"
    COMPLETED = "completed"


class NotFoundError(LookupError):
    """A course, quiz or user the request names does not exist."""


class CourseNotFoundError(NotFoundError):
    pass


class QuizNotFoundError(NotFoundError):
    pass


class UserNotFoundError(NotFoundError):
    pass


class ProgressLockedError(Exception):
    def __init__(self, message: str, redirect_to: str):
        super().__init__(message)
        self.message = message
        self.redirect_to = redirect_to


# ---------------------------
# Helpers
# ---------------------------

def _course_or_raise(manager: AdminDataManager, slug: str) -> Dict[str, Any]:
    course = manager.get_course_by_slug(slug)
    if not course:
        raise CourseNotFoundError("Course not found")
    return course

def _user_or_raise(manager: AdminDataManager, user_id: str) -> Dict[str, Any]:
    user = manager.get_user(user_id)
    if not user:
        raise UserNotFoundError("User not found")
    return user

def current_percent(user: Optional[Dict[str, Any]], course_id: str) -> int:
    if not user:
        return 0
    return int((user.get("progress") or {}).get(course_id) or 0)

def stage_for(user: Optional[Dict[str, Any]], course_id: str) -> ProgressStage:
    if not user or course_id not in (user.get("enrolledCourses") or []):
        return ProgressStage.NOT_ENROLLED
    if course_id in (user.get("completedCourses") or []):
        return ProgressStage.COMPLETED
    pct = current_percent(user, course_id)
    if pct >= COMPLETE_PROGRESS:
        return ProgressStage.COMPLETED
    if pct >= QUIZ_PROGRESS:
        return ProgressStage.QUIZ_PASSED
    if pct >= VIDEO_PROGRESS:
        return ProgressStage.VIDEO_DONE
    return ProgressStage.ENROLLED

def score_answers(questions: Sequence[Dict[str, Any]], answers: Sequence[int]) -> Dict[str, Any]:
    """Unanswered questions (missing or -1) count as wrong."""
    review = []
    correct = 0
    for i, q in enumerate(questions):
        selected = answers[i] if i < len(answers) else -1
        is_correct = selected == q.get("correctAnswer")
        correct += 1 if is_correct else 0
        review.append({
            "questionId": q.get("id"),
            "selected": selected,
            "correctAnswer": q.get("correctAnswer"),
            "isCorrect": is_correct,
            "explanation": q.get("explanation", ""),
        })
    total = len(questions)
    score = js_round(correct / total * 100) if total else 0
    return {"correct": correct, "total": total, "score": score, "review": review}

def _steps(user: Optional[Dict[str, Any]], course_id: str) -> List[Dict[str, Any]]:
    enrolled = bool(user) and course_id in (user.get("enrolledCourses") or [])
    pct = current_percent(user, course_id)
    return [
        {"id": 1, "name": "video", "title": "Watch Video", "description": "Complete the video lecture",
         "completed": pct >= VIDEO_PROGRESS, "locked": not enrolled},
        {"id": 2, "name": "quiz", "title": "Take Quiz", "description": "Pass with 80% score",
         "completed": pct >= QUIZ_PROGRESS, "locked": pct < VIDEO_PROGRESS},
        {"id": 3, "name": "assessment", "title": "Video Assessment", "description": "Record your explanation",
         "completed": pct >= COMPLETE_PROGRESS, "locked": pct < QUIZ_PROGRESS},
    ]

def _progress_view(user: Optional[Dict[str, Any]], course: Dict[str, Any]) -> Dict[str, Any]:
    course_id = course["id"]
    return {
        "courseId": course_id,
        "courseSlug": course["slug"],
        "stage": stage_for(user, course_id).value,
        "progress": current_percent(user, course_id),
        "enrolled": bool(user) and course_id in (user.get("enrolledCourses") or []),
        "completed": bool(user) and course_id in (user.get("completedCourses") or []),
        "steps": _steps(user, course_id),
    }


# ---------------------------
# Gates
# ---------------------------

def require_quiz_access(user: Dict[str, Any], course: Dict[str, Any]) -> None:
    if current_percent(user, course["id"]) < VIDEO_PROGRESS:
        raise ProgressLockedError("Watch the course video before taking the quiz", f"/courses/{course['slug']}")

def require_assessment_access(user: Dict[str, Any], course: Dict[str, Any]) -> None:
    if current_percent(user, course["id"]) < QUIZ_PROGRESS:
        raise ProgressLockedError("Pass the quiz before submitting the assessment", f"/quiz/{course['slug']}")


# ---------------------------
# Transitions
# ---------------------------

def course_progress(manager: AdminDataManager, *, user_id: str, slug: str) -> Dict[str, Any]:
    course = _course_or_raise(manager, slug)
    return _progress_view(manager.get_user(user_id), course)

def enroll(manager: AdminDataManager, *, user_id: str, slug: str) -> Dict[str, Any]:
    course = _course_or_raise(manager, slug)
    user = manager.enroll_user_in_course(user_id, course["id"])
    if user is None:
        raise UserNotFoundError("User not found")
    return _progress_view(user, course)

def mark_video_watched(manager: AdminDataManager, *, user_id: str, slug: str) -> Dict[str, Any]:
    course = _course_or_raise(manager, slug)
    with manager.transaction():
        user = _user_or_raise(manager, user_id)
        if course["id"] in (user.get("enrolledCourses") or []):
            user = manager.set_progress(user_id, course["id"], VIDEO_PROGRESS) or user
        else:
            logger.debug(f"Video signal ignored, {user_id} not enrolled in {slug}")
    return _progress_view(user, course)

def quiz_for_student(manager: AdminDataManager, *, user_id: str, slug: str) -> Dict[str, Any]:
    course = _course_or_raise(manager, slug)
    user = _user_or_raise(manager, user_id)
    require_quiz_access(user, course)
    quiz = manager.get_quiz(slug)
    if not quiz or not quiz.get("questions"):
        raise QuizNotFoundError("The quiz for this course is not yet available.")
    return {
        "courseSlug": slug,
        "courseTitle": course.get("title", ""),
        "passingScore": PASSING_SCORE,
        "timeLimitSeconds": QUIZ_TIME_LIMIT_SECONDS,
        "questions": [
            {"id": q.get("id"), "question": q.get("question", ""), "options": q.get("options", [])}
            for q in quiz["questions"]
        ],
    }

def submit_quiz(manager: AdminDataManager, *, user_id: str, slug: str, answers: Sequence[int]) -> Dict[str, Any]:
    course = _course_or_raise(manager, slug)
    with manager.transaction():
        user = _user_or_raise(manager, user_id)
        require_quiz_access(user, course)
        quiz = manager.get_quiz(slug)
        if not quiz or not quiz.get("questions"):
            raise QuizNotFoundError("The quiz for this course is not yet available.")

        result = score_answers(quiz["questions"], answers)
        passed = result["score"] >= PASSING_SCORE
        if passed:
            user = manager.set_progress(user_id, course["id"], QUIZ_PROGRESS) or user
        manager.record_quiz_attempt(slug, result["score"])

    logger.info(f"Quiz attempt {user_id}/{slug}: {result['score']}% ({'passed' if passed else 'failed'})")
    return {
        **result,
        "passed": passed,
        "passingScore": PASSING_SCORE,
        "progress": current_percent(user, course["id"]),
        "redirect_to": f"/assessments/{slug}" if passed else None,
    }

def submit_assessment(manager: AdminDataManager, *, user_id: str, slug: str,
                      recording: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    course = _course_or_raise(manager, slug)
    with manager.transaction():
        user = _user_or_raise(manager, user_id)
        require_assessment_access(user, course)
        user = manager.complete_course(user_id, course["id"]) or user

    # the recording itself is handled by the media-capture side
    logger.info(f"Assessment submitted {user_id}/{slug}, recording={recording or {}}")
    return {**_progress_view(user, course), "redirect_to": f"/certificates/{slug}"}


# ---------------------------
# Read models
# ---------------------------

def dashboard(manager: AdminDataManager, *, user_id: str) -> Dict[str, Any]:
    user = _user_or_raise(manager, user_id)
    courses = {c["id"]: c for c in manager.get_courses()}
    items = []
    for cid in user.get("enrolledCourses") or []:
        course = courses.get(cid)
        if not course:
            continue
        items.append({
            "courseId": cid,
            "courseSlug": course["slug"],
            "courseTitle": course.get("title", ""),
            "category": course.get("category"),
            "progress": current_percent(user, cid),
            "stage": stage_for(user, cid).value,
        })
    total = len(items)
    avg = round(sum(it["progress"] for it in items) / total, 2) if total else 0.0
    return {
        "userId": user_id,
        "enrolledCount": total,
        "completedCount": len(user.get("completedCourses") or []),
        "certificateCount": len(user.get("certificates") or []),
        "averageProgress": avg,
        "items": items,
    }

def _certificate(user: Dict[str, Any], course: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "certificateId": f"{user['id']}-{course['id']}",
        "studentName": user.get("name", ""),
        "courseId": course["id"],
        "courseSlug": course["slug"],
        "courseTitle": course.get("title", ""),
        "category": course.get("category"),
    }

def certificates(manager: AdminDataManager, *, user_id: str) -> List[Dict[str, Any]]:
    user = _user_or_raise(manager, user_id)
    earned = set(user.get("certificates") or [])
    return [_certificate(user, c) for c in manager.get_courses() if c["id"] in earned]

def certificate(manager: AdminDataManager, *, user_id: str, slug: str) -> Dict[str, Any]:
    course = _course_or_raise(manager, slug)
    user = _user_or_raise(manager, user_id)
    if course["id"] not in (user.get("certificates") or []):
        raise ProgressLockedError("Complete the assessment to earn this certificate", f"/courses/{slug}")
    return _certificate(user, course)
