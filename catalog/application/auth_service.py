"""One-time code sign-in over email."""
from __future__ import annotations

import hmac
import logging
import re
import secrets
from datetime import timedelta
from typing import Optional

from catalog.domain.entities import Session, utcnow
from catalog.domain.errors import AuthError, ValidationError
from catalog.domain.events import OtpIssued, UserSignedIn, event_publisher
from catalog.domain.ports import EmailSender, OneTimeCodeStore, UserStore
from catalog.infrastructure.identity import JwtSessionIssuer

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def generate_code() -> str:
    """Six-digit numeric code."""
    return str(100000 + secrets.randbelow(900000))


def normalize_email(email: Optional[str]) -> str:
    if not email or not email.strip():
        raise ValidationError("Email is required.")
    email = email.strip().lower()
    if not EMAIL_PATTERN.match(email):
        raise ValidationError(f"Invalid email address: {email}")
    return email


class OtpAuthService:
    """Issues one-time codes by email and exchanges them for sessions."""

    def __init__(
        self,
        codes: OneTimeCodeStore,
        users: UserStore,
        email_sender: EmailSender,
        session_issuer: JwtSessionIssuer,
        sender_address: str,
        app_name: str = "Central Ring",
        ttl_seconds: int = 300,
    ) -> None:
        self._codes = codes
        self._users = users
        self._email = email_sender
        self._sessions = session_issuer
        self._sender = sender_address
        self._app_name = app_name
        self._ttl_seconds = ttl_seconds

    def send_otp(self, email: str) -> None:
        """
        Generate a code, store it and email it.

        Raises:
            ValidationError: If the email is missing or malformed
            UpstreamError: If the code cannot be stored or the email not sent
        """
        email = normalize_email(email)
        code = generate_code()
        self._codes.put_code(email, code, utcnow() + timedelta(seconds=self._ttl_seconds))

        minutes = max(1, self._ttl_seconds // 60)
        self._email.send(
            self._sender,
            email,
            f"Your OTP for {self._app_name}",
            f"<p>Your One-Time Password (OTP) is: <strong>{code}</strong></p>"
            f"<p>This OTP is valid for {minutes} minutes.</p>",
        )
        logger.info(f"OTP sent to {email}")
        event_publisher.publish(OtpIssued(aggregate_id=email, email=email))

    def verify_otp(self, email: str, token: str) -> Session:
        """
        Check a code and issue a session for the email's user.

        The consumed code is deleted; a failed delete is logged only.

        Raises:
            ValidationError: If email or token is missing
            AuthError: If the code is unknown, wrong or expired
        """
        if not email or not token:
            raise ValidationError("Email and token are required.")
        email = normalize_email(email)

        stored = self._codes.get_code(email)
        if stored is None:
            raise AuthError("Invalid or expired OTP.")
        code, expires_at = stored
        # Compared as bytes; str operands must be ASCII
        if not hmac.compare_digest(code.encode(), token.strip().encode()) or expires_at < utcnow():
            raise AuthError("Invalid or expired OTP.")

        try:
            self._codes.delete_code(email)
        except Exception:
            logger.exception(f"Failed to delete consumed OTP for {email}")

        user, created = self._users.get_or_create_user(email)
        session = self._sessions.issue(user)
        event_publisher.publish(UserSignedIn(aggregate_id=user.id, email=email, created=created))
        return session
