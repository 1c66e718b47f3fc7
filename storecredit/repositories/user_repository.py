"""User repository for data access."""

from uuid import UUID

from sqlalchemy.orm import Session

from storecredit.models.user import User
from storecredit.schemas.user import UserCreate


class UserRepository:
    """Repository for User model."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: UUID) -> User | None:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_by_email(self, email: str) -> User | None:
        return self.db.query(User).filter(User.email == email).first()

    def create(self, data: UserCreate) -> User:
        user = User(email=data.email, name=data.name, is_admin=data.is_admin)
        self.db.add(user)
        self.db.flush()
        self.db.refresh(user)
        return user
