from datetime import datetime
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from catalog.db.models import OneTimeCode
from catalog.domain.errors import UpstreamError
from typing import Optional, Tuple


class OneTimeCodeRepository:
    """Repository for outstanding one-time codes, one per email."""

    def __init__(self, db: Session):
        self.db = db

    def put_code(self, email: str, code: str, expires_at: datetime) -> None:
        """Store a code for the email, replacing any outstanding one."""
        try:
            row = self.db.get(OneTimeCode, email)
            if row is None:
                self.db.add(OneTimeCode(email=email, code=code, expires_at=expires_at))
            else:
                row.code = code
                row.expires_at = expires_at
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise UpstreamError("Failed to store one-time code", cause=e) from e

    def get_code(self, email: str) -> Optional[Tuple[str, datetime]]:
        """
        Get the outstanding code for an email.

        Returns:
            Tuple of (code, expires_at) if found, None otherwise
        """
        row = self.db.get(OneTimeCode, email)
        if row is None:
            return None
        return row.code, row.expires_at

    def delete_code(self, email: str) -> None:
        """Delete the code for an email; raises on store failure."""
        try:
            self.db.query(OneTimeCode).filter(OneTimeCode.email == email).delete()
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
