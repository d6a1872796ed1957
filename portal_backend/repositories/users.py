"""Credential store backed by the ``users`` table."""

from __future__ import annotations

from sqlalchemy.orm import Session

from portal_backend.models.user import ROLE_USER, User


class UserStore:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: int) -> User | None:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_by_public_id(self, public_id: str) -> User | None:
        return self.db.query(User).filter(User.public_id == public_id).first()

    def get_by_email(self, email: str) -> User | None:
        return self.db.query(User).filter(User.email == email).first()

    def still_exists(self, user_id: int) -> bool:
        # end the read transaction so a concurrent delete is visible
        self.db.commit()
        return self.get_by_id(user_id) is not None

    def list(self) -> list[User]:
        return self.db.query(User).order_by(User.created_at.asc(), User.id.asc()).all()

    def create(self, name: str, email: str, password_hash: str, role: str = ROLE_USER) -> User:
        user = User(name=name, email=email, password_hash=password_hash, role=role)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def save(self, user: User) -> User:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def delete(self, user: User) -> None:
        self.db.delete(user)
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
