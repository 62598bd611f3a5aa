# repos/stats.py
import math
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

ACTIVE_WINDOW = timedelta(days=7)


def js_round(value: float) -> int:
    # half-up, like the browser's Math.round (Python's round() is half-even)
    return int(math.floor(value + 0.5))


def parse_timestamp(value: Any) -> Optional[datetime]:
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def empty_stats() -> Dict[str, int]:
    return {
        "totalStudents": 0,
        "totalCourses": 0,
        "totalCertificates": 0,
        "completionRate": 0,
        "totalQuizzes": 0,
        "totalEnrollments": 0,
        "activeUsers": 0,
        "newUsersThisMonth": 0,
    }


def calculate_stats(
    users: List[Dict[str, Any]],
    courses: List[Dict[str, Any]],
    quizzes: List[Dict[str, Any]],
    now: datetime,
) -> Dict[str, int]:
    """
    Recompute the admin dashboard aggregates from scratch.

    Calendar-month and 7-day windows are evaluated in UTC at ``now``.
    Users with unparseable dates are left out of those two counts.
    """
    now = now.astimezone(timezone.utc)
    total_enrollments = sum(len(u.get("enrolledCourses") or []) for u in users)
    total_completions = sum(len(u.get("completedCourses") or []) for u in users)
    completion_rate = js_round(total_completions / total_enrollments * 100) if total_enrollments > 0 else 0

    new_this_month = 0
    active = 0
    cutoff = now - ACTIVE_WINDOW
    for u in users:
        joined = parse_timestamp(u.get("joinedDate"))
        if joined:
            joined = joined.astimezone(timezone.utc)
            if joined.year == now.year and joined.month == now.month:
                new_this_month += 1
        last_active = parse_timestamp(u.get("lastActive"))
        if last_active and last_active >= cutoff:
            active += 1

    return {
        "totalStudents": sum(1 for u in users if u.get("role") == "student"),
        "totalCourses": len(courses),
        "totalCertificates": sum(len(u.get("certificates") or []) for u in users),
        "completionRate": completion_rate,
        "totalQuizzes": len(quizzes),
        "totalEnrollments": total_enrollments,
        "activeUsers": active,
        "newUsersThisMonth": new_this_month,
    }
