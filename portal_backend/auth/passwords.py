from passlib.context import CryptContext


_pwd = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

# Verified against when the email is unknown so both login failures cost the same.
_DUMMY_HASH = _pwd.hash("not-a-real-password")


def hash_password(password: str) -> str:
    if not password:
        raise ValueError("password_blank")
    return _pwd.hash(password)


def verify_password(password: str, password_hash: str | None) -> bool:
    if not password or not password_hash:
        return False
    try:
        return _pwd.verify(password, password_hash)
    except (ValueError, TypeError):
        return False


def burn_verification(password: str) -> None:
    _pwd.verify(password or "", _DUMMY_HASH)
