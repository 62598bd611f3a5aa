from datetime import datetime, timezone

from skillnexis.repos.stats import calculate_stats, empty_stats, js_round, parse_timestamp

NOW = datetime(2024, 3, 15, 12, 0, 0, tzinfo=timezone.utc)


def _user(**kw):
    base = {
        "id": kw.pop("id", "u"),
        "role": "student",
        "enrolledCourses": [],
        "completedCourses": [],
        "certificates": [],
        "joinedDate": "2024-01-01T00:00:00.000Z",
        "lastActive": "2024-01-01T00:00:00.000Z",
    }
    base.update(kw)
    return base


def test_js_round_rounds_half_up():
    assert js_round(0.5) == 1
    assert js_round(2.5) == 3
    assert js_round(66.66) == 67
    assert js_round(33.33) == 33


def test_parse_timestamp_handles_z_suffix_and_garbage():
    assert parse_timestamp("2024-03-01T00:00:00.000Z") == datetime(2024, 3, 1, tzinfo=timezone.utc)
    assert parse_timestamp("2024-03-01T00:00:00").tzinfo is not None
    assert parse_timestamp("not a date") is None
    assert parse_timestamp(None) is None


def test_empty_collections_give_zero_stats():
    assert calculate_stats([], [], [], NOW) == empty_stats()


def test_completion_rate_and_totals():
    users = [
        _user(id="a", enrolledCourses=["1", "2"], completedCourses=["1"], certificates=["1"]),
        _user(id="b", enrolledCourses=["1", "2"], completedCourses=["2"], certificates=["2"]),
        _user(id="c", role="admin"),
    ]
    stats = calculate_stats(users, [{"id": "1"}, {"id": "2"}], [{"courseSlug": "x"}], NOW)
    assert stats["totalStudents"] == 2
    assert stats["totalCourses"] == 2
    assert stats["totalQuizzes"] == 1
    assert stats["totalEnrollments"] == 4
    assert stats["totalCertificates"] == 2
    assert stats["completionRate"] == 50


def test_completion_rate_zero_without_enrollments():
    stats = calculate_stats([_user()], [], [], NOW)
    assert stats["completionRate"] == 0


def test_new_users_counted_by_utc_calendar_month():
    users = [
        _user(id="a", joinedDate="2024-03-01T00:00:00.000Z"),
        _user(id="b", joinedDate="2024-02-29T23:59:59.000Z"),
        _user(id="c", joinedDate="2023-03-10T00:00:00.000Z"),
        _user(id="d", joinedDate="garbage"),
    ]
    assert calculate_stats(users, [], [], NOW)["newUsersThisMonth"] == 1


def test_active_users_within_seven_days():
    users = [
        _user(id="a", lastActive="2024-03-14T12:00:00.000Z"),
        _user(id="b", lastActive="2024-03-08T12:00:00.000Z"),
        _user(id="c", lastActive="2024-03-08T11:59:59.000Z"),
        _user(id="d", lastActive=None),
    ]
    assert calculate_stats(users, [], [], NOW)["activeUsers"] == 2
