# services/store_keys.py
# Names match the keys the browser build wrote to local storage.

def users_key() -> str:
    return "skillnexis_admin_users"

def courses_key() -> str:
    return "skillnexis_admin_courses"

def quizzes_key() -> str:
    return "skillnexis_admin_quizzes"

def stats_key() -> str:
    return "skillnexis_admin_stats"

# Auth/session
def session_key(session_id: str) -> str:
    return f"skillnexis_session:{session_id}"

def user_sessions_key(user_id: str) -> str:
    return f"skillnexis_user_sessions:{user_id}"
