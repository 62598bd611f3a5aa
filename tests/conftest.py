import os
from datetime import datetime, timezone

import pytest

# settings are read at import time
os.environ["JWT_SECRET"] = "test-secret-key-that-is-long-enough-0123456789"
os.environ["STORE_BACKEND"] = "memory"
os.environ["ADMIN_EMAIL"] = "admin@skillnexis.com"
os.environ["ADMIN_PASSWORD"] = "admin-secret-123"
os.environ["SEED_SAMPLE_DATA"] = "false"

from skillnexis.repos.admin_data import AdminDataManager  # noqa: E402
from skillnexis.store.memory import InMemoryStore  # noqa: E402


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 3, 15, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def manager(store, clock):
    return AdminDataManager(store, clock=clock)


@pytest.fixture
def course(manager):
    return manager.add_course({
        "title": "Python",
        "slug": "python",
        "description": "Learn Python",
        "category": "Programming",
    })


@pytest.fixture
def quiz(manager, course):
    questions = [
        {"id": i, "question": f"Q{i}", "options": ["a", "b", "c", "d"], "correctAnswer": 0, "explanation": f"E{i}"}
        for i in range(1, 6)
    ]
    return manager.add_quiz({"courseSlug": course["slug"], "questions": questions})


@pytest.fixture
def student(manager):
    return manager.add_user({"name": "Jane", "email": "jane@example.com", "role": "student"})
