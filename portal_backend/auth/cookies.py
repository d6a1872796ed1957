import jwt

from portal_backend.core import config


def sign_session_token(token: str) -> str:
    return jwt.encode({"sid": token}, config.SESSION_SECRET, algorithm=config.SESSION_ALGORITHM)


def read_session_token(cookie_value: str | None) -> str | None:
    if not cookie_value:
        return None
    try:
        payload = jwt.decode(cookie_value, config.SESSION_SECRET, algorithms=[config.SESSION_ALGORITHM])
    except jwt.InvalidTokenError:
        return None
    token = payload.get("sid")
    return token if isinstance(token, str) and token else None
