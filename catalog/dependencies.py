from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

import httpx
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from catalog.config import settings
from catalog.db.database import get_db
from catalog.db.repositories import (
    EntityRepository,
    EntityTypeRepository,
    OneTimeCodeRepository,
    UserRepository,
)
from catalog.application.auth_service import OtpAuthService
from catalog.application.filter_service import FilterEngine
from catalog.application.interaction_service import InteractionTracker
from catalog.application.registry_service import EntityRegistry, EntityTypeRegistry
from catalog.domain.errors import AuthError
from catalog.domain.ports import CredentialVerifier, EmailSender
from catalog.infrastructure.email_gateway import LoggingEmailGateway, ResendEmailGateway
from catalog.infrastructure.identity import (
    ChainedCredentialVerifier,
    JwtSessionIssuer,
    LocalJwtVerifier,
    SessionProviderVerifier,
)

logger = logging.getLogger(__name__)

# Security scheme for OpenAPI docs
security_scheme = HTTPBearer(auto_error=False)


@lru_cache
def get_http_client() -> httpx.Client:
    return httpx.Client(timeout=httpx.Timeout(settings.HTTP_TIMEOUT_SECONDS))


def get_entity_type_registry(db: Session = Depends(get_db)) -> EntityTypeRegistry:
    return EntityTypeRegistry(store=EntityTypeRepository(db))


def get_entity_registry(db: Session = Depends(get_db)) -> EntityRegistry:
    return EntityRegistry(store=EntityRepository(db), types=EntityTypeRepository(db))


def get_interaction_tracker(db: Session = Depends(get_db)) -> InteractionTracker:
    return InteractionTracker(store=EntityRepository(db))


def get_filter_engine() -> FilterEngine:
    return FilterEngine()


def get_email_sender() -> EmailSender:
    if not settings.EMAIL_API_KEY:
        return LoggingEmailGateway()
    return ResendEmailGateway(
        api_key=settings.EMAIL_API_KEY,
        api_url=settings.EMAIL_API_URL,
        client=get_http_client(),
    )


def get_session_issuer() -> JwtSessionIssuer:
    return JwtSessionIssuer(
        secret=settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
        ttl_seconds=settings.SESSION_TTL_SECONDS,
    )


def get_credential_verifier() -> CredentialVerifier:
    """Local sessions first, then the external identity provider if configured."""
    verifiers: list[CredentialVerifier] = [
        LocalJwtVerifier(secret=settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM),
    ]
    if settings.IDENTITY_PROVIDER_URL:
        verifiers.append(SessionProviderVerifier(
            base_url=settings.IDENTITY_PROVIDER_URL,
            api_key=settings.IDENTITY_PROVIDER_API_KEY,
            client=get_http_client(),
        ))
    return ChainedCredentialVerifier(verifiers)


def get_otp_auth_service(
    db: Session = Depends(get_db),
    email_sender: EmailSender = Depends(get_email_sender),
    session_issuer: JwtSessionIssuer = Depends(get_session_issuer),
) -> OtpAuthService:
    return OtpAuthService(
        codes=OneTimeCodeRepository(db),
        users=UserRepository(db),
        email_sender=email_sender,
        session_issuer=session_issuer,
        sender_address=settings.EMAIL_FROM,
        app_name=settings.APP_NAME,
        ttl_seconds=settings.OTP_TTL_SECONDS,
    )


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme),
    verifier: CredentialVerifier = Depends(get_credential_verifier),
) -> str:
    """User id of the bearer token's owner; raises AuthError if there is none."""
    if credentials is None or not credentials.credentials:
        raise AuthError("No authorization token provided.")
    return verifier.verify(credentials.credentials)
