# repos/admin_data.py
"""
Admin data manager: the only writer of users, courses and quizzes.

Records are kept as JSON lists under one key per collection. Every
mutation runs inside a unit of work that holds the store lock, stages the
changed collections, recomputes stats and writes everything with a single
``set_many`` call on commit.
"""

import json
import logging
import re
import threading
import uuid
from contextlib import contextmanager
from copy import deepcopy
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from skillnexis.repos.stats import calculate_stats as compute_stats, js_round
from skillnexis.services.store_keys import courses_key, quizzes_key, stats_key, users_key
from skillnexis.store.base import KeyValueStore

logger = logging.getLogger(__name__)

CATEGORIES = ("Programming", "Web Development", "Data Science", "Cloud & IoT", "Mobile")
COURSE_DERIVED_FIELDS = ("id", "createdAt", "updatedAt", "enrolledCount", "completedCount")
QUIZ_DERIVED_FIELDS = ("createdAt", "updatedAt", "totalAttempts", "averageScore")
RECORD_KEYS = (users_key(), courses_key(), quizzes_key())


class DuplicateSlugError(ValueError):
    pass


# ---------------------------
# Helpers
# ---------------------------

def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(ts: datetime) -> str:
    return ts.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def slugify(title: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")


def _find_index(items: List[Dict[str, Any]], field: str, value: Any) -> int:
    for i, item in enumerate(items):
        if item.get(field) == value:
            return i
    return -1


class AdminDataManager:
    def __init__(self, store: KeyValueStore, clock: Callable[[], datetime] = utc_now):
        self._store = store
        self._clock = clock
        self._local = threading.local()

    # ---------------------------
    # Unit of work
    # ---------------------------

    @contextmanager
    def transaction(self):
        depth = getattr(self._local, "depth", 0)
        if depth:
            # nested call joins the outer unit of work
            self._local.depth = depth + 1
            try:
                yield
            finally:
                self._local.depth = depth
            return

        with self._store.lock():
            self._local.depth = 1
            self._local.pending = {}
            try:
                yield
                self._commit(self._local.pending)
            finally:
                self._local.depth = 0
                self._local.pending = None

    def _commit(self, pending: Dict[str, Any]) -> None:
        if not pending:
            return
        if any(k in pending for k in RECORD_KEYS):
            pending[stats_key()] = self._compute_stats()
        self._store.set_many({k: json.dumps(v) for k, v in pending.items()})
        logger.debug(f"Committed keys: {', '.join(sorted(pending))}")

    def _pending(self) -> Optional[Dict[str, Any]]:
        return getattr(self._local, "pending", None)

    def _load(self, key: str) -> Any:
        pending = self._pending()
        if pending is not None and key in pending:
            return deepcopy(pending[key])
        raw = self._store.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.error(f"Error reading {key} from store: {str(e)}")
            return None

    def _load_list(self, key: str) -> List[Dict[str, Any]]:
        data = self._load(key)
        if data is None:
            return []
        if not isinstance(data, list):
            logger.error(f"Unexpected payload under {key}: {type(data).__name__}")
            return []
        return data

    def _stage(self, key: str, value: Any) -> None:
        pending = self._pending()
        if pending is None:
            raise RuntimeError("Writes must run inside AdminDataManager.transaction()")
        pending[key] = value

    def _now_iso(self) -> str:
        return to_iso(self._clock())

    def _new_course_id(self, courses: List[Dict[str, Any]]) -> str:
        # millisecond timestamp, bumped past any collision
        candidate = int(self._clock().timestamp() * 1000)
        taken = {c.get("id") for c in courses}
        while str(candidate) in taken:
            candidate += 1
        return str(candidate)

    # ---------------------------
    # Users
    # ---------------------------

    def get_users(self) -> List[Dict[str, Any]]:
        return self._load_list(users_key())

    def get_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        users = self.get_users()
        idx = _find_index(users, "id", user_id)
        return users[idx] if idx != -1 else None

    def get_user_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        wanted = email.strip().lower()
        for u in self.get_users():
            if (u.get("email") or "").strip().lower() == wanted:
                return u
        return None

    def add_user(self, user: Dict[str, Any]) -> Dict[str, Any]:
        now = self._now_iso()
        record = {
            "id": uuid.uuid4().hex[:9],
            "role": "student",
            "enrolledCourses": [],
            "completedCourses": [],
            "certificates": [],
            "progress": {},
            "joinedDate": now,
            "lastActive": now,
            **{k: v for k, v in user.items() if v is not None},
        }
        with self.transaction():
            users = self.get_users()
            if _find_index(users, "id", record["id"]) != -1:
                raise ValueError(f"User id {record['id']} already exists")
            users.append(record)
            self._stage(users_key(), users)
        logger.info(f"User added: {record['id']} ({record.get('email')})")
        return record

    def update_user(self, user_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        with self.transaction():
            users = self.get_users()
            idx = _find_index(users, "id", user_id)
            if idx == -1:
                return None
            patch = {k: v for k, v in updates.items() if k != "id"}
            users[idx] = {**users[idx], **patch}
            self._stage(users_key(), users)
            return users[idx]

    def touch_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        return self.update_user(user_id, {"lastActive": self._now_iso()})

    def delete_user(self, user_id: str) -> bool:
        with self.transaction():
            users = self.get_users()
            remaining = [u for u in users if u.get("id") != user_id]
            if len(remaining) == len(users):
                return False
            self._stage(users_key(), remaining)
        logger.info(f"User deleted: {user_id}")
        return True

    # ---------------------------
    # Courses
    # ---------------------------

    def get_courses(self) -> List[Dict[str, Any]]:
        return self._load_list(courses_key())

    def get_course(self, course_id: str) -> Optional[Dict[str, Any]]:
        courses = self.get_courses()
        idx = _find_index(courses, "id", course_id)
        return courses[idx] if idx != -1 else None

    def get_course_by_slug(self, slug: str) -> Optional[Dict[str, Any]]:
        courses = self.get_courses()
        idx = _find_index(courses, "slug", slug)
        return courses[idx] if idx != -1 else None

    def add_course(self, course: Dict[str, Any]) -> Dict[str, Any]:
        data = {k: v for k, v in course.items() if k not in COURSE_DERIVED_FIELDS}
        data["slug"] = (data.get("slug") or "").strip() or slugify(data.get("title", ""))
        if not data["slug"]:
            raise ValueError("Course slug could not be derived from the title")
        with self.transaction():
            courses = self.get_courses()
            if _find_index(courses, "slug", data["slug"]) != -1:
                raise DuplicateSlugError(f"A course with slug '{data['slug']}' already exists")
            now = self._now_iso()
            record = {
                **data,
                "id": self._new_course_id(courses),
                "createdAt": now,
                "updatedAt": now,
                "enrolledCount": 0,
                "completedCount": 0,
            }
            courses.append(record)
            self._stage(courses_key(), courses)
        logger.info(f"Course added: {record['id']} ({record['slug']})")
        return record

    def update_course(self, course_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        with self.transaction():
            courses = self.get_courses()
            idx = _find_index(courses, "id", course_id)
            if idx == -1:
                return None
            old_slug = courses[idx].get("slug")
            patch = {k: v for k, v in updates.items() if k not in ("id", "createdAt")}
            new_slug = patch.get("slug") or old_slug
            if new_slug != old_slug:
                if _find_index(courses, "slug", new_slug) != -1:
                    raise DuplicateSlugError(f"A course with slug '{new_slug}' already exists")
                self._rename_quiz(old_slug, new_slug)
            courses[idx] = {**courses[idx], **patch, "slug": new_slug, "updatedAt": self._now_iso()}
            self._stage(courses_key(), courses)
            return courses[idx]

    def delete_course(self, course_id: str) -> bool:
        with self.transaction():
            courses = self.get_courses()
            idx = _find_index(courses, "id", course_id)
            if idx == -1:
                return False
            # resolve the slug before the course record goes away
            slug = courses[idx].get("slug")
            del courses[idx]
            self._stage(courses_key(), courses)

            quizzes = self.get_quizzes()
            remaining = [q for q in quizzes if q.get("courseSlug") != slug]
            if len(remaining) != len(quizzes):
                self._stage(quizzes_key(), remaining)
        logger.info(f"Course deleted: {course_id} ({slug})")
        return True

    # ---------------------------
    # Quizzes
    # ---------------------------

    def get_quizzes(self) -> List[Dict[str, Any]]:
        return self._load_list(quizzes_key())

    def get_quiz(self, course_slug: str) -> Optional[Dict[str, Any]]:
        quizzes = self.get_quizzes()
        idx = _find_index(quizzes, "courseSlug", course_slug)
        return quizzes[idx] if idx != -1 else None

    def add_quiz(self, quiz: Dict[str, Any]) -> Dict[str, Any]:
        now = self._now_iso()
        record = {
            **{k: v for k, v in quiz.items() if k not in QUIZ_DERIVED_FIELDS},
            "createdAt": now,
            "updatedAt": now,
            "totalAttempts": 0,
            "averageScore": 0,
        }
        with self.transaction():
            # one quiz per course: replace rather than duplicate
            quizzes = [q for q in self.get_quizzes() if q.get("courseSlug") != record["courseSlug"]]
            quizzes.append(record)
            self._stage(quizzes_key(), quizzes)
        logger.info(f"Quiz saved for course {record['courseSlug']} ({len(record.get('questions', []))} questions)")
        return record

    def update_quiz(self, course_slug: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        with self.transaction():
            quizzes = self.get_quizzes()
            idx = _find_index(quizzes, "courseSlug", course_slug)
            if idx == -1:
                return None
            quizzes[idx] = {**quizzes[idx], **updates, "updatedAt": self._now_iso()}
            self._stage(quizzes_key(), quizzes)
            return quizzes[idx]

    def delete_quiz(self, course_slug: str) -> bool:
        with self.transaction():
            quizzes = self.get_quizzes()
            remaining = [q for q in quizzes if q.get("courseSlug") != course_slug]
            if len(remaining) == len(quizzes):
                return False
            self._stage(quizzes_key(), remaining)
        return True

    def record_quiz_attempt(self, course_slug: str, score: int) -> Optional[Dict[str, Any]]:
        with self.transaction():
            quizzes = self.get_quizzes()
            idx = _find_index(quizzes, "courseSlug", course_slug)
            if idx == -1:
                return None
            quiz = quizzes[idx]
            attempts = int(quiz.get("totalAttempts") or 0)
            average = float(quiz.get("averageScore") or 0)
            quiz["totalAttempts"] = attempts + 1
            quiz["averageScore"] = js_round((average * attempts + score) / (attempts + 1))
            self._stage(quizzes_key(), quizzes)
            return quiz

    def _rename_quiz(self, old_slug: str, new_slug: str) -> None:
        quizzes = self.get_quizzes()
        idx = _find_index(quizzes, "courseSlug", old_slug)
        if idx == -1:
            return
        quizzes[idx]["courseSlug"] = new_slug
        self._stage(quizzes_key(), quizzes)

    # ---------------------------
    # Enrollment / progress
    # ---------------------------

    def enroll_user_in_course(self, user_id: str, course_id: str) -> Optional[Dict[str, Any]]:
        with self.transaction():
            users = self.get_users()
            courses = self.get_courses()
            u_idx = _find_index(users, "id", user_id)
            c_idx = _find_index(courses, "id", course_id)
            if u_idx == -1 or c_idx == -1:
                return None
            user, course = users[u_idx], courses[c_idx]
            if course_id in user.get("enrolledCourses", []):
                return user

            user.setdefault("enrolledCourses", []).append(course_id)
            user.setdefault("progress", {})[course_id] = 0
            user["lastActive"] = self._now_iso()
            course["enrolledCount"] = int(course.get("enrolledCount") or 0) + 1
            self._stage(users_key(), users)
            self._stage(courses_key(), courses)
        logger.info(f"User {user_id} enrolled in course {course_id}")
        return user

    def complete_course(self, user_id: str, course_id: str) -> Optional[Dict[str, Any]]:
        with self.transaction():
            users = self.get_users()
            courses = self.get_courses()
            u_idx = _find_index(users, "id", user_id)
            c_idx = _find_index(courses, "id", course_id)
            if u_idx == -1 or c_idx == -1:
                return None
            user, course = users[u_idx], courses[c_idx]
            if course_id in user.get("completedCourses", []):
                return user

            # completed courses must stay a subset of enrolled ones
            if course_id not in user.setdefault("enrolledCourses", []):
                user["enrolledCourses"].append(course_id)
                course["enrolledCount"] = int(course.get("enrolledCount") or 0) + 1
            user.setdefault("completedCourses", []).append(course_id)
            certificates = user.setdefault("certificates", [])
            if course_id not in certificates:
                certificates.append(course_id)
            user.setdefault("progress", {})[course_id] = 100
            user["lastActive"] = self._now_iso()
            course["completedCount"] = int(course.get("completedCount") or 0) + 1
            self._stage(users_key(), users)
            self._stage(courses_key(), courses)
        logger.info(f"User {user_id} completed course {course_id}")
        return user

    def set_progress(self, user_id: str, course_id: str, percent: int) -> Optional[Dict[str, Any]]:
        """Raise a user's progress on a course; never lowers it."""
        with self.transaction():
            users = self.get_users()
            idx = _find_index(users, "id", user_id)
            if idx == -1:
                return None
            user = users[idx]
            progress = user.setdefault("progress", {})
            if int(progress.get(course_id) or 0) >= percent:
                return user
            progress[course_id] = percent
            user["lastActive"] = self._now_iso()
            self._stage(users_key(), users)
            return user

    # ---------------------------
    # Stats
    # ---------------------------

    def _compute_stats(self) -> Dict[str, int]:
        return compute_stats(self.get_users(), self.get_courses(), self.get_quizzes(), self._clock())

    def get_stats(self) -> Dict[str, int]:
        cached = self._load(stats_key())
        if isinstance(cached, dict):
            return cached
        return self.calculate_stats()

    def calculate_stats(self) -> Dict[str, int]:
        with self.transaction():
            stats = self._compute_stats()
            self._stage(stats_key(), stats)
        return stats

    def update_stats(self) -> Dict[str, int]:
        return self.calculate_stats()
