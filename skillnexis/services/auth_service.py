# services/auth_service.py
"""
Demo-grade login/registration.

Students are identified by email alone (no password check). The admin
account is a single configured credential. Do not reuse this for anything
that needs real authentication.
"""
import json
import logging
import re
import secrets
from typing import Any, Dict, List, Optional

from passlib.context import CryptContext

from skillnexis.auth.jwt import create_session_token
from skillnexis.config import settings
from skillnexis.repos.admin_data import AdminDataManager
from skillnexis.services.store_keys import session_key, user_sessions_key
from skillnexis.store.base import KeyValueStore

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
SNAPSHOT_FIELDS = ("id", "name", "email", "role", "enrolledCourses", "completedCourses", "certificates", "progress")
ADMIN_USER_ID = "admin"

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class ValidationError(ValueError):
    pass


class InvalidCredentialsError(ValueError):
    pass


class SessionExpiredError(ValueError):
    pass


def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(password: str, hashed: str) -> bool:
    return pwd_context.verify(password, hashed)


def is_admin_credential(password: str) -> bool:
    if settings.ADMIN_PASSWORD_HASH:
        return verify_password(password, settings.ADMIN_PASSWORD_HASH)
    if settings.ADMIN_PASSWORD:
        return secrets.compare_digest(password.encode(), settings.ADMIN_PASSWORD.encode())
    return False


def admin_login_configured() -> bool:
    return bool(settings.ADMIN_PASSWORD_HASH or settings.ADMIN_PASSWORD)


def _admin_email() -> str:
    return settings.ADMIN_EMAIL.strip().lower()


# ---------------------------
# Session snapshots
# ---------------------------

def snapshot(user: Dict[str, Any]) -> Dict[str, Any]:
    return {k: user.get(k) for k in SNAPSHOT_FIELDS}

def _session_ttl() -> int:
    return settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60

def save_session(store: KeyValueStore, jti: str, user: Dict[str, Any]) -> None:
    store.set(session_key(jti), json.dumps(snapshot(user)), ttl=_session_ttl())

def load_session(store: KeyValueStore, jti: str) -> Optional[Dict[str, Any]]:
    raw = store.get(session_key(jti))
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError as e:
        logger.error(f"Error reading session {jti}: {str(e)}")
        return None

def delete_session(store: KeyValueStore, jti: str) -> None:
    store.delete(session_key(jti))


def _session_ids(store: KeyValueStore, user_id: str) -> List[str]:
    raw = store.get(user_sessions_key(user_id))
    if not raw:
        return []
    try:
        ids = json.loads(raw)
    except ValueError as e:
        logger.error(f"Error reading session index for {user_id}: {str(e)}")
        return []
    return ids if isinstance(ids, list) else []

def _index_session(store: KeyValueStore, user_id: str, jti: str) -> None:
    # drop ids whose snapshot already expired or was logged out
    live = [sid for sid in _session_ids(store, user_id) if store.get(session_key(sid))]
    live.append(jti)
    store.set(user_sessions_key(user_id), json.dumps(live), ttl=_session_ttl())

def end_user_sessions(store: KeyValueStore, user_id: str) -> int:
    """Drop every live session of a user. Returns how many were indexed."""
    ids = _session_ids(store, user_id)
    for sid in ids:
        delete_session(store, sid)
    store.delete(user_sessions_key(user_id))
    if ids:
        logger.info(f"Ended {len(ids)} session(s) for user {user_id}")
    return len(ids)


def _start_session(store: KeyValueStore, user: Dict[str, Any]) -> Dict[str, Any]:
    token, jti = create_session_token({"sub": user["id"], "role": user["role"]})
    save_session(store, jti, user)
    _index_session(store, user["id"], jti)
    return {
        "access_token": token,
        "token_type": "bearer",
        "user": snapshot(user),
        "redirect_to": "/admin" if user["role"] == "admin" else "/dashboard",
    }


# ---------------------------
# Login / register / logout
# ---------------------------

def login(manager: AdminDataManager, store: KeyValueStore, email: str, password: str) -> Dict[str, Any]:
    if not email or not password:
        raise ValidationError("Email and password are required")
    email = email.strip().lower()
    if not EMAIL_RE.match(email):
        raise ValidationError("Please enter a valid email address")

    if email == _admin_email():
        if not is_admin_credential(password):
            logger.warning("Rejected admin login attempt")
            raise InvalidCredentialsError("Invalid credentials. Please check your email and password.")
        admin = {
            "id": ADMIN_USER_ID,
            "name": "Admin",
            "email": email,
            "role": "admin",
            "enrolledCourses": [],
            "completedCourses": [],
            "certificates": [],
            "progress": {},
        }
        logger.info("Admin logged in")
        return _start_session(store, admin)

    existing = manager.get_user_by_email(email)
    if existing:
        user = manager.touch_user(existing["id"]) or existing
    else:
        user = manager.add_user({
            "name": email.split("@")[0] or "User",
            "email": email,
            "role": "student",
        })
    logger.info(f"Student logged in: {user['id']}")
    return _start_session(store, user)


def register(manager: AdminDataManager, store: KeyValueStore, name: str, email: str, password: str) -> Dict[str, Any]:
    if not name or not email or not password:
        raise ValidationError("All fields are required")
    name = name.strip()
    email = email.strip().lower()
    if len(name) < 2:
        raise ValidationError("Name must be at least 2 characters long")
    if not EMAIL_RE.match(email):
        raise ValidationError("Please enter a valid email address")
    if len(password) < 6:
        raise ValidationError("Password must be at least 6 characters long")
    if email == _admin_email():
        raise ValidationError("This email address is reserved")

    with manager.transaction():
        if manager.get_user_by_email(email):
            raise ValidationError("An account with this email already exists")
        user = manager.add_user({"name": name, "email": email, "role": "student"})
    logger.info(f"Student registered: {user['id']}")
    return _start_session(store, user)


def logout(store: KeyValueStore, jti: str) -> Dict[str, str]:
    delete_session(store, jti)
    return {"message": "Logged out successfully", "redirect_to": "/"}


def current_user(manager: AdminDataManager, store: KeyValueStore, jti: str) -> Dict[str, Any]:
    """
    Rehydrate the session snapshot, then refresh it from the manager so the
    session never serves progress older than the stored record.
    """
    session = load_session(store, jti)
    if not session:
        raise SessionExpiredError("Session expired")
    if session.get("role") == "admin":
        return session

    record = manager.get_user(session["id"]) or manager.get_user_by_email(session.get("email") or "")
    if record is None:
        # the record was deleted behind the session's back: restore it
        logger.warning(f"Session user {session['id']} missing from store, re-adding")
        record = manager.add_user(dict(session))

    fresh = snapshot(record)
    if fresh != session:
        save_session(store, jti, record)
    return fresh
