import pytest

from skillnexis.services import progress_service
from skillnexis.services.progress_service import (
    CourseNotFoundError, NotFoundError, ProgressLockedError, ProgressStage, QuizNotFoundError,
    UserNotFoundError,
)


def _enroll_and_watch(manager, student):
    progress_service.enroll(manager, user_id=student["id"], slug="python")
    return progress_service.mark_video_watched(manager, user_id=student["id"], slug="python")


def test_enroll_starts_at_zero(manager, student, course):
    view = progress_service.enroll(manager, user_id=student["id"], slug="python")
    assert view["stage"] == ProgressStage.ENROLLED.value
    assert view["progress"] == 0
    assert view["enrolled"] is True
    assert [s["locked"] for s in view["steps"]] == [False, True, True]


def test_enroll_unknown_course(manager, student):
    with pytest.raises(CourseNotFoundError):
        progress_service.enroll(manager, user_id=student["id"], slug="missing")


def test_video_ignored_when_not_enrolled(manager, student, course):
    view = progress_service.mark_video_watched(manager, user_id=student["id"], slug="python")
    assert view["stage"] == ProgressStage.NOT_ENROLLED.value
    assert manager.get_user(student["id"])["progress"] == {}


def test_video_unlocks_quiz(manager, student, course, quiz):
    view = _enroll_and_watch(manager, student)
    assert view["progress"] == 33
    assert view["stage"] == ProgressStage.VIDEO_DONE.value
    assert view["steps"][1]["locked"] is False

    payload = progress_service.quiz_for_student(manager, user_id=student["id"], slug="python")
    assert payload["passingScore"] == 80
    assert payload["timeLimitSeconds"] == 600
    assert "correctAnswer" not in payload["questions"][0]


def test_quiz_locked_before_video(manager, student, course, quiz):
    progress_service.enroll(manager, user_id=student["id"], slug="python")
    with pytest.raises(ProgressLockedError) as exc:
        progress_service.quiz_for_student(manager, user_id=student["id"], slug="python")
    assert exc.value.redirect_to == "/courses/python"


def test_quiz_missing_for_course(manager, student, course):
    _enroll_and_watch(manager, student)
    with pytest.raises(QuizNotFoundError):
        progress_service.quiz_for_student(manager, user_id=student["id"], slug="python")


def test_four_of_five_passes(manager, student, course, quiz):
    _enroll_and_watch(manager, student)
    result = progress_service.submit_quiz(manager, user_id=student["id"], slug="python", answers=[0, 0, 0, 0, 1])
    assert result["correct"] == 4
    assert result["score"] == 80
    assert result["passed"] is True
    assert result["progress"] == 66
    assert result["redirect_to"] == "/assessments/python"
    assert result["review"][4]["isCorrect"] is False
    assert result["review"][4]["explanation"] == "E5"
    assert manager.get_quiz("python")["totalAttempts"] == 1


def test_three_of_five_fails_and_can_retry(manager, student, course, quiz):
    _enroll_and_watch(manager, student)
    result = progress_service.submit_quiz(manager, user_id=student["id"], slug="python", answers=[0, 0, 0, 1, 1])
    assert result["score"] == 60
    assert result["passed"] is False
    assert result["progress"] == 33
    assert result["redirect_to"] is None

    retry = progress_service.submit_quiz(manager, user_id=student["id"], slug="python", answers=[0] * 5)
    assert retry["passed"] is True
    assert manager.get_quiz("python")["totalAttempts"] == 2


def test_unanswered_questions_count_as_wrong():
    questions = [{"id": 1, "correctAnswer": 2}, {"id": 2, "correctAnswer": 0}]
    result = progress_service.score_answers(questions, [-1])
    assert result["correct"] == 0
    assert result["score"] == 0
    assert result["review"][1]["selected"] == -1


def test_failed_retake_does_not_lower_progress(manager, student, course, quiz):
    _enroll_and_watch(manager, student)
    progress_service.submit_quiz(manager, user_id=student["id"], slug="python", answers=[0] * 5)
    result = progress_service.submit_quiz(manager, user_id=student["id"], slug="python", answers=[1] * 5)
    assert result["passed"] is False
    assert result["progress"] == 66


def test_video_signal_after_quiz_keeps_progress(manager, student, course, quiz):
    _enroll_and_watch(manager, student)
    progress_service.submit_quiz(manager, user_id=student["id"], slug="python", answers=[0] * 5)
    view = progress_service.mark_video_watched(manager, user_id=student["id"], slug="python")
    assert view["progress"] == 66
    assert view["stage"] == ProgressStage.QUIZ_PASSED.value
    assert manager.get_user(student["id"])["progress"][course["id"]] == 66


def test_unknown_user_is_not_found(manager, course):
    with pytest.raises(UserNotFoundError):
        progress_service.dashboard(manager, user_id="ghost")
    with pytest.raises(NotFoundError):
        progress_service.quiz_for_student(manager, user_id="ghost", slug="python")


def test_assessment_locked_until_quiz_passed(manager, student, course, quiz):
    _enroll_and_watch(manager, student)
    with pytest.raises(ProgressLockedError) as exc:
        progress_service.submit_assessment(manager, user_id=student["id"], slug="python")
    assert exc.value.redirect_to == "/quiz/python"


def test_full_flow_earns_certificate(manager, student, course, quiz):
    _enroll_and_watch(manager, student)
    progress_service.submit_quiz(manager, user_id=student["id"], slug="python", answers=[0] * 5)
    view = progress_service.submit_assessment(manager, user_id=student["id"], slug="python",
                                              recording={"duration": 42})
    assert view["progress"] == 100
    assert view["stage"] == ProgressStage.COMPLETED.value
    assert view["redirect_to"] == "/certificates/python"

    certs = progress_service.certificates(manager, user_id=student["id"])
    assert [c["courseSlug"] for c in certs] == ["python"]
    cert = progress_service.certificate(manager, user_id=student["id"], slug="python")
    assert cert["studentName"] == "Jane"

    board = progress_service.dashboard(manager, user_id=student["id"])
    assert board["completedCount"] == 1
    assert board["averageProgress"] == 100.0


def test_certificate_not_earned(manager, student, course):
    with pytest.raises(ProgressLockedError):
        progress_service.certificate(manager, user_id=student["id"], slug="python")


def test_dashboard_average_progress(manager, student, course):
    other = manager.add_course({"title": "Java", "description": "d", "category": "Programming"})
    _enroll_and_watch(manager, student)
    progress_service.enroll(manager, user_id=student["id"], slug=other["slug"])
    board = progress_service.dashboard(manager, user_id=student["id"])
    assert board["enrolledCount"] == 2
    assert board["averageProgress"] == 16.5
