from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from portal_backend.auth.dependencies import get_session_manager, require_admin
from portal_backend.auth.sessions import SessionManager, SessionSnapshot
from portal_backend.database import get_db
from portal_backend.models.user import EMAIL_MAX_LENGTH, NAME_MAX_LENGTH
from portal_backend.repositories.users import UserStore
from portal_backend.services.users_admin import UserAdminService

router = APIRouter(tags=['admin'])


class CreateUserRequest(BaseModel):
    name: str | None = Field(default=None, max_length=NAME_MAX_LENGTH)
    email: str | None = Field(default=None, max_length=EMAIL_MAX_LENGTH)
    password: str | None = None
    role: str | None = None


class UpdateUserRequest(BaseModel):
    name: str | None = Field(default=None, max_length=NAME_MAX_LENGTH)
    email: str | None = Field(default=None, max_length=EMAIL_MAX_LENGTH)
    role: str | None = None


def get_user_admin_service(
    db: Session = Depends(get_db),
    sessions: SessionManager = Depends(get_session_manager),
) -> UserAdminService:
    return UserAdminService(UserStore(db), sessions)


@router.get('/users')
def list_users(
    admin: SessionSnapshot = Depends(require_admin),
    service: UserAdminService = Depends(get_user_admin_service),
):
    return {'success': True, 'data': service.list_users()}


@router.post('/users')
def create_user(
    data: CreateUserRequest,
    admin: SessionSnapshot = Depends(require_admin),
    service: UserAdminService = Depends(get_user_admin_service),
):
    public_id = service.create_user(data.name, data.email, data.password, data.role)
    return {'success': True, 'id': public_id}


@router.put('/users/{public_id}')
def update_user(
    public_id: str,
    data: UpdateUserRequest,
    admin: SessionSnapshot = Depends(require_admin),
    service: UserAdminService = Depends(get_user_admin_service),
):
    return {'success': True, 'user': service.update_user(public_id, data.name, data.email, data.role)}


@router.delete('/users/{public_id}')
def delete_user(
    public_id: str,
    admin: SessionSnapshot = Depends(require_admin),
    service: UserAdminService = Depends(get_user_admin_service),
):
    service.delete_user(public_id, acting_user_id=admin.id)
    return {'success': True}
