from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from catalog.db.models import User
from catalog.domain.entities import UserRecord
from catalog.domain.errors import UpstreamError
from typing import Optional, Tuple


def to_user_record(row: User) -> UserRecord:
    return UserRecord(id=row.id, email=row.email, created_at=row.created_at)


class UserRepository:
    """Repository for user operations."""

    def __init__(self, db: Session):
        self.db = db

    def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        row = self.db.query(User).filter(User.email == email).first()
        return to_user_record(row) if row else None

    def get_or_create_user(self, email: str) -> Tuple[UserRecord, bool]:
        """
        Find a user by email, creating one on first sign-in.

        Returns:
            Tuple of (user, created)
        """
        existing = self.get_user_by_email(email)
        if existing:
            return existing, False

        row = User(email=email)
        try:
            self.db.add(row)
            self.db.commit()
        except IntegrityError:
            # Another request created the same user first
            self.db.rollback()
            return self.get_user_by_email(email), False
        except SQLAlchemyError as e:
            self.db.rollback()
            raise UpstreamError("Failed to store user", cause=e) from e
        self.db.refresh(row)
        return to_user_record(row), True
