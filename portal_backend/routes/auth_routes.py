from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Session

from portal_backend.auth.cookies import sign_session_token
from portal_backend.auth.dependencies import (
    get_optional_session,
    get_session_manager,
    get_session_token,
    require_authenticated,
)
from portal_backend.auth.sessions import SessionManager, SessionSnapshot
from portal_backend.core import config
from portal_backend.database import get_db
from portal_backend.models.user import EMAIL_MAX_LENGTH, NAME_MAX_LENGTH
from portal_backend.repositories.users import UserStore
from portal_backend.services.accounts import AccountService

router = APIRouter(tags=['auth'])


class _Body(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SignupRequest(_Body):
    name: str | None = Field(default=None, max_length=NAME_MAX_LENGTH)
    email: str | None = Field(default=None, max_length=EMAIL_MAX_LENGTH)
    password: str | None = None


class LoginRequest(_Body):
    email: str | None = None
    password: str | None = None


class ChangePasswordRequest(_Body):
    old_password: str | None = None
    new_password: str | None = None
    confirm_password: str | None = None


class DeleteAccountRequest(_Body):
    password: str | None = None


class UpdateProfileRequest(_Body):
    name: str | None = Field(default=None, max_length=NAME_MAX_LENGTH)
    email: str | None = Field(default=None, max_length=EMAIL_MAX_LENGTH)


def get_account_service(
    db: Session = Depends(get_db),
    sessions: SessionManager = Depends(get_session_manager),
) -> AccountService:
    return AccountService(UserStore(db), sessions)


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=config.SESSION_COOKIE_NAME,
        value=sign_session_token(token),
        httponly=True,
        secure=config.SESSION_COOKIE_SECURE,
        samesite='lax',
        path='/',
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(key=config.SESSION_COOKIE_NAME, path='/')


@router.post('/signup')
def signup(data: SignupRequest, service: AccountService = Depends(get_account_service)):
    service.signup(data.name, data.email, data.password)
    return {'success': True, 'message': 'Account created. Please log in.'}


@router.post('/login')
def login(
    data: LoginRequest,
    response: Response,
    current_token: str | None = Depends(get_session_token),
    service: AccountService = Depends(get_account_service),
):
    token, snapshot = service.login(data.email, data.password, current_token=current_token)
    set_session_cookie(response, token)
    return {'success': True, 'message': 'Login successful', 'role': snapshot.role}


@router.get('/session')
def session_status(
    session: SessionSnapshot | None = Depends(get_optional_session),
    service: AccountService = Depends(get_account_service),
):
    return service.get_session_status(session)


@router.post('/logout')
def logout(
    response: Response,
    token: str | None = Depends(get_session_token),
    service: AccountService = Depends(get_account_service),
):
    service.logout(token)
    clear_session_cookie(response)
    return {'success': True}


@router.get('/account')
def get_account(
    session: SessionSnapshot = Depends(require_authenticated),
    service: AccountService = Depends(get_account_service),
):
    return {'success': True, 'user': service.get_account(session)}


@router.put('/account')
def update_account(
    data: UpdateProfileRequest,
    session: SessionSnapshot = Depends(require_authenticated),
    service: AccountService = Depends(get_account_service),
):
    return {'success': True, 'user': service.update_profile(session, data.name, data.email)}


@router.post('/change-password')
def change_password(
    data: ChangePasswordRequest,
    session: SessionSnapshot = Depends(require_authenticated),
    service: AccountService = Depends(get_account_service),
):
    service.change_password(session, data.old_password, data.new_password, data.confirm_password)
    return {'success': True, 'message': 'Password updated'}


@router.delete('/delete-account')
def delete_account(
    data: DeleteAccountRequest,
    response: Response,
    session: SessionSnapshot = Depends(require_authenticated),
    service: AccountService = Depends(get_account_service),
):
    service.delete_account(session, data.password)
    clear_session_cookie(response)
    return {'success': True, 'message': 'Account deleted'}
