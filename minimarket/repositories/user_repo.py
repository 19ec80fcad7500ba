# minimarket/repositories/user_repo.py
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from minimarket.core.errors import StoreError
from minimarket.models.user import User


class SqlUserRepository:
    """
    Data access layer for User.

    Responsibilities:
      - Pure DB operations (lookups + insert)
      - No FastAPI, no HTTP, no credential checks
    """

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, user_id: str) -> User | None:
        """Return a User by primary key, or None if not found."""
        return self.session.get(User, user_id)

    def get_by_email(self, email: str) -> User | None:
        """Return a User by unique email, or None if not found."""
        stmt = select(User).where(User.email == email)
        return self.session.exec(stmt).first()

    def create(self, user: User) -> User:
        """Insert a new User and return the persisted row."""
        try:
            self.session.add(user)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StoreError(str(e)) from e
        self.session.refresh(user)
        return user
