from fastapi import Depends, Request
from sqlalchemy.orm import Session

from portal_backend.auth.cookies import read_session_token
from portal_backend.auth.sessions import SessionManager, SessionSnapshot
from portal_backend.core import config
from portal_backend.core.exceptions import Forbidden, Unauthenticated
from portal_backend.database import get_db, store_operation
from portal_backend.repositories.users import UserStore


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.sessions


def get_session_token(request: Request) -> str | None:
    return read_session_token(request.cookies.get(config.SESSION_COOKIE_NAME))


def get_optional_session(
    token: str | None = Depends(get_session_token),
    sessions: SessionManager = Depends(get_session_manager),
) -> SessionSnapshot | None:
    return sessions.get_session(token)


def require_authenticated(
    session: SessionSnapshot | None = Depends(get_optional_session),
) -> SessionSnapshot:
    if session is None:
        raise Unauthenticated()
    return session


def require_admin(
    session: SessionSnapshot = Depends(require_authenticated),
    sessions: SessionManager = Depends(get_session_manager),
    db: Session = Depends(get_db),
) -> SessionSnapshot:
    # The snapshot can be older than the last admin edit, so the role is re-read here.
    store = UserStore(db)
    with store_operation(store, "checking admin role"):
        user = store.get_by_id(session.id)

    if user is None:
        sessions.destroy_user_sessions(session.id)
        raise Unauthenticated()

    current = SessionSnapshot.from_user(user)
    if current != session:
        sessions.update_user_sessions(current)

    if not current.is_admin:
        raise Forbidden()
    return current
