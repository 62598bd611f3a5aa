import json
from datetime import timedelta

import pytest

from skillnexis.repos.admin_data import AdminDataManager, DuplicateSlugError, slugify, to_iso
from skillnexis.services.store_keys import courses_key, quizzes_key, stats_key, users_key


def test_add_user_fills_defaults(manager, clock):
    user = manager.add_user({"name": "Jane", "email": "jane@example.com"})
    assert user["role"] == "student"
    assert user["enrolledCourses"] == []
    assert user["completedCourses"] == []
    assert user["certificates"] == []
    assert user["progress"] == {}
    assert user["joinedDate"] == to_iso(clock.now) == "2024-03-15T12:00:00.000Z"
    assert manager.get_user(user["id"]) == user


def test_add_user_rejects_duplicate_id(manager):
    manager.add_user({"id": "u1", "name": "A", "email": "a@example.com"})
    with pytest.raises(ValueError):
        manager.add_user({"id": "u1", "name": "B", "email": "b@example.com"})
    assert len(manager.get_users()) == 1


def test_get_user_by_email_is_case_insensitive(manager, student):
    assert manager.get_user_by_email("  JANE@Example.com ")["id"] == student["id"]
    assert manager.get_user_by_email("nobody@example.com") is None


def test_update_user_cannot_change_id(manager, student):
    updated = manager.update_user(student["id"], {"id": "other", "name": "Janet"})
    assert updated["id"] == student["id"]
    assert updated["name"] == "Janet"


def test_missing_records_are_no_ops(manager):
    assert manager.update_user("nope", {"name": "x"}) is None
    assert manager.delete_user("nope") is False
    assert manager.update_course("nope", {"title": "x"}) is None
    assert manager.delete_course("nope") is False
    assert manager.update_quiz("nope", {"questions": []}) is None
    assert manager.delete_quiz("nope") is False
    assert manager.enroll_user_in_course("nope", "nope") is None
    assert manager.complete_course("nope", "nope") is None
    assert manager.get_users() == []


def test_add_course_sets_derived_fields(manager, clock):
    course = manager.add_course({
        "title": "Data Science",
        "description": "d",
        "category": "Data Science",
        "enrolledCount": 99,
    })
    assert course["slug"] == "data-science"
    assert course["id"] == str(int(clock.now.timestamp() * 1000))
    assert course["enrolledCount"] == 0
    assert course["completedCount"] == 0
    assert course["createdAt"] == course["updatedAt"]


def test_course_ids_unique_within_same_millisecond(manager):
    a = manager.add_course({"title": "A", "description": "d", "category": "Mobile"})
    b = manager.add_course({"title": "B", "description": "d", "category": "Mobile"})
    assert a["id"] != b["id"]


def test_duplicate_slug_rejected(manager, course):
    with pytest.raises(DuplicateSlugError):
        manager.add_course({"title": "Python again", "slug": "python", "description": "d", "category": "Programming"})
    other = manager.add_course({"title": "Java", "description": "d", "category": "Programming"})
    with pytest.raises(DuplicateSlugError):
        manager.update_course(other["id"], {"slug": "python"})


def test_update_course_stamps_updated_at(manager, course, clock):
    clock.now = clock.now + timedelta(hours=1)
    updated = manager.update_course(course["id"], {"title": "Python 3"})
    assert updated["title"] == "Python 3"
    assert updated["updatedAt"] == "2024-03-15T13:00:00.000Z"
    assert updated["createdAt"] == course["createdAt"]


def test_slug_rename_moves_quiz(manager, course, quiz):
    manager.update_course(course["id"], {"slug": "python-3"})
    assert manager.get_quiz("python") is None
    assert manager.get_quiz("python-3")["questions"] == quiz["questions"]


def test_delete_course_cascades_to_quiz(manager, course, quiz):
    other = manager.add_course({"title": "Java", "description": "d", "category": "Programming"})
    manager.add_quiz({"courseSlug": other["slug"], "questions": quiz["questions"]})

    assert manager.delete_course(course["id"]) is True
    assert manager.get_course(course["id"]) is None
    assert manager.get_quiz("python") is None
    assert manager.get_quiz("java") is not None


def test_add_quiz_replaces_existing(manager, course, quiz):
    replacement = manager.add_quiz({"courseSlug": "python", "questions": quiz["questions"][:2]})
    quizzes = manager.get_quizzes()
    assert len(quizzes) == 1
    assert quizzes[0]["questions"] == replacement["questions"]
    assert quizzes[0]["totalAttempts"] == 0


def test_record_quiz_attempt_keeps_running_average(manager, quiz):
    manager.record_quiz_attempt("python", 80)
    result = manager.record_quiz_attempt("python", 65)
    assert result["totalAttempts"] == 2
    assert result["averageScore"] == 73


def test_enroll_is_idempotent(manager, student, course):
    manager.enroll_user_in_course(student["id"], course["id"])
    user = manager.enroll_user_in_course(student["id"], course["id"])
    assert user["enrolledCourses"] == [course["id"]]
    assert user["progress"][course["id"]] == 0
    assert manager.get_course(course["id"])["enrolledCount"] == 1


def test_complete_course_is_idempotent(manager, student, course):
    manager.enroll_user_in_course(student["id"], course["id"])
    manager.complete_course(student["id"], course["id"])
    user = manager.complete_course(student["id"], course["id"])
    assert user["completedCourses"] == [course["id"]]
    assert user["certificates"] == [course["id"]]
    assert user["progress"][course["id"]] == 100
    assert manager.get_course(course["id"])["completedCount"] == 1


def test_complete_without_enrollment_keeps_subset(manager, student, course):
    user = manager.complete_course(student["id"], course["id"])
    assert set(user["completedCourses"]) <= set(user["enrolledCourses"])
    assert manager.get_course(course["id"])["enrolledCount"] == 1


def test_set_progress_never_lowers(manager, student, course):
    manager.enroll_user_in_course(student["id"], course["id"])
    manager.set_progress(student["id"], course["id"], 66)
    user = manager.set_progress(student["id"], course["id"], 33)
    assert user["progress"][course["id"]] == 66


def test_stats_written_with_every_record_change(manager, store, student, course):
    stats = json.loads(store.get(stats_key()))
    assert stats["totalStudents"] == 1
    assert stats["totalCourses"] == 1

    manager.enroll_user_in_course(student["id"], course["id"])
    manager.complete_course(student["id"], course["id"])
    stats = manager.get_stats()
    assert stats["totalEnrollments"] == 1
    assert stats["completionRate"] == 100
    assert stats["totalCertificates"] == 1


def test_get_stats_computes_when_missing(manager, store, student):
    store.delete(stats_key())
    assert manager.get_stats()["totalStudents"] == 1


def test_corrupt_collection_reads_as_empty(manager, store):
    store.set(users_key(), "{not json")
    store.set(courses_key(), json.dumps({"not": "a list"}))
    assert manager.get_users() == []
    assert manager.get_courses() == []


def test_failed_transaction_writes_nothing(manager, store, student):
    with pytest.raises(RuntimeError):
        with manager.transaction():
            manager.update_user(student["id"], {"name": "Changed"})
            raise RuntimeError("boom")
    assert manager.get_user(student["id"])["name"] == "Jane"


def test_nested_transaction_commits_once(store, clock):
    writes = []

    class RecordingStore(type(store)):
        def set_many(self, items):
            writes.append(sorted(items))
            super().set_many(items)

    manager = AdminDataManager(RecordingStore(), clock=clock)
    with manager.transaction():
        user = manager.add_user({"name": "A", "email": "a@example.com"})
        course = manager.add_course({"title": "Go", "description": "d", "category": "Programming"})
        manager.enroll_user_in_course(user["id"], course["id"])
    assert writes == [sorted([users_key(), courses_key(), stats_key()])]


def test_writes_outside_transaction_rejected(manager):
    with pytest.raises(RuntimeError):
        manager._stage(quizzes_key(), [])


def test_slugify():
    assert slugify("Web Development (HTML, CSS)") == "web-development-html-css"
