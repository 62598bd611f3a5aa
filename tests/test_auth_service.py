import pytest

from skillnexis.auth.jwt import decode_token
from skillnexis.config import settings
from skillnexis.services import auth_service
from skillnexis.services.auth_service import InvalidCredentialsError, SessionExpiredError, ValidationError
from skillnexis.services.store_keys import session_key
from skillnexis.store.memory import InMemoryStore


def test_register_then_login_with_any_password(manager, store):
    registered = auth_service.register(manager, store, "Jane", "Jane@Example.com", "secret1")
    assert registered["redirect_to"] == "/dashboard"
    assert registered["user"]["email"] == "jane@example.com"

    logged_in = auth_service.login(manager, store, "jane@example.com", "anything")
    assert logged_in["user"]["id"] == registered["user"]["id"]
    assert len(manager.get_users()) == 1

    [user] = manager.get_users()
    assert user["name"] == "Jane"
    assert user["role"] == "student"
    assert user["enrolledCourses"] == []
    assert user["completedCourses"] == []


def test_login_creates_unknown_student(manager, store):
    session = auth_service.login(manager, store, "new.person@example.com", "pw")
    assert session["user"]["name"] == "new.person"
    assert session["user"]["role"] == "student"
    assert manager.get_user_by_email("new.person@example.com") is not None


@pytest.mark.parametrize("name,email,password,message", [
    ("", "a@example.com", "secret1", "All fields are required"),
    ("J", "a@example.com", "secret1", "Name must be at least 2 characters long"),
    ("Jane", "not-an-email", "secret1", "Please enter a valid email address"),
    ("Jane", "a@example.com", "12345", "Password must be at least 6 characters long"),
    ("Jane", "admin@skillnexis.com", "secret1", "This email address is reserved"),
])
def test_register_validation(manager, store, name, email, password, message):
    with pytest.raises(ValidationError, match=message):
        auth_service.register(manager, store, name, email, password)


def test_register_duplicate_email(manager, store, student):
    with pytest.raises(ValidationError, match="already exists"):
        auth_service.register(manager, store, "Jane", "JANE@example.com", "secret1")


def test_login_requires_fields(manager, store):
    with pytest.raises(ValidationError, match="Email and password are required"):
        auth_service.login(manager, store, "", "")


def test_admin_login(manager, store):
    session = auth_service.login(manager, store, "admin@skillnexis.com", "admin-secret-123")
    assert session["redirect_to"] == "/admin"
    assert session["user"]["role"] == "admin"
    assert manager.get_users() == []


def test_admin_wrong_password(manager, store):
    with pytest.raises(InvalidCredentialsError):
        auth_service.login(manager, store, "admin@skillnexis.com", "wrong")


def test_admin_password_hash_wins(monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_PASSWORD_HASH", auth_service.hash_password("hashed-pass"))
    assert auth_service.is_admin_credential("hashed-pass") is True
    assert auth_service.is_admin_credential("admin-secret-123") is False


def test_session_snapshot_refreshes_from_manager(manager, store, student, course):
    session = auth_service.login(manager, store, student["email"], "x")
    jti = decode_token(session["access_token"])["jti"]

    manager.enroll_user_in_course(student["id"], course["id"])
    user = auth_service.current_user(manager, store, jti)
    assert user["enrolledCourses"] == [course["id"]]
    assert auth_service.load_session(store, jti)["enrolledCourses"] == [course["id"]]


def test_deleted_user_restored_from_session(manager, store, student):
    session = auth_service.login(manager, store, student["email"], "x")
    jti = decode_token(session["access_token"])["jti"]
    manager.delete_user(student["id"])

    user = auth_service.current_user(manager, store, jti)
    assert user["id"] == student["id"]
    assert manager.get_user(student["id"]) is not None


def test_logout_removes_session(manager, store, student):
    session = auth_service.login(manager, store, student["email"], "x")
    jti = decode_token(session["access_token"])["jti"]
    assert auth_service.logout(store, jti)["redirect_to"] == "/"
    with pytest.raises(SessionExpiredError):
        auth_service.current_user(manager, store, jti)


def test_decode_token_rejects_garbage():
    with pytest.raises(ValueError, match="Invalid token"):
        decode_token("not.a.token")


class Ticker:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def _session_keys(store):
    return [k for k in store.keys() if k.startswith(session_key(""))]


def test_sessions_expire_with_the_token(manager):
    ticker = Ticker()
    store = InMemoryStore(timer=ticker)
    for _ in range(50):
        auth_service.login(manager, store, "a@example.com", "x")
    assert len(_session_keys(store)) == 50

    ticker.now += settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60 + 1
    session = auth_service.login(manager, store, "a@example.com", "x")
    assert len(_session_keys(store)) == 1
    jti = decode_token(session["access_token"])["jti"]
    assert auth_service.load_session(store, jti)["email"] == "a@example.com"


def test_end_user_sessions(manager, store, student):
    jtis = [
        decode_token(auth_service.login(manager, store, student["email"], "x")["access_token"])["jti"]
        for _ in range(3)
    ]
    assert auth_service.end_user_sessions(store, student["id"]) == 3
    for jti in jtis:
        with pytest.raises(SessionExpiredError):
            auth_service.current_user(manager, store, jti)


def test_admin_login_configured(monkeypatch):
    assert auth_service.admin_login_configured() is True
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", None)
    monkeypatch.setattr(settings, "ADMIN_PASSWORD_HASH", None)
    assert auth_service.admin_login_configured() is False
