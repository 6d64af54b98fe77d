"""Bearer credential verification and session issuing.

Two identity sources are accepted: sessions this service signs itself after a
one-time code is verified, and sessions issued by an external identity
provider. ``ChainedCredentialVerifier`` tries them in order and reduces both to
a plain user id.
"""
from __future__ import annotations

import logging
from datetime import timedelta
from typing import Sequence

import httpx
from jose import JWTError, jwt

from catalog.domain.entities import Session, UserRecord, utcnow
from catalog.domain.errors import AuthError, UpstreamError
from catalog.domain.ports import CredentialVerifier

logger = logging.getLogger(__name__)

TOKEN_ISSUER = "catalog-api"


class JwtSessionIssuer:
    """Signs session tokens for users who verified a one-time code."""

    def __init__(self, secret: str, algorithm: str = "HS256", ttl_seconds: int = 3600) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._ttl_seconds = ttl_seconds

    def issue(self, user: UserRecord) -> Session:
        now = utcnow()
        claims = {
            "sub": user.id,
            "email": user.email,
            "iss": TOKEN_ISSUER,
            "iat": now,
            "exp": now + timedelta(seconds=self._ttl_seconds),
        }
        token = jwt.encode(claims, self._secret, algorithm=self._algorithm)
        return Session(
            access_token=token,
            token_type="bearer",
            expires_in=self._ttl_seconds,
            user=user,
        )


class LocalJwtVerifier:
    """Accepts tokens signed by JwtSessionIssuer."""

    name = "local"

    def __init__(self, secret: str, algorithm: str = "HS256") -> None:
        self._secret = secret
        self._algorithm = algorithm

    def verify(self, token: str) -> str:
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                issuer=TOKEN_ISSUER,
            )
        except JWTError as e:
            raise AuthError("Invalid or expired token.") from e

        user_id = payload.get("sub")
        if not user_id:
            raise AuthError("Token missing sub claim")
        return user_id


class SessionProviderVerifier:
    """Asks an external identity provider who the token belongs to."""

    name = "session_provider"

    def __init__(self, base_url: str, api_key: str, client: httpx.Client) -> None:
        self._user_url = base_url.rstrip("/") + "/auth/v1/user"
        self._api_key = api_key
        self._client = client

    def verify(self, token: str) -> str:
        try:
            response = self._client.get(
                self._user_url,
                headers={"Authorization": f"Bearer {token}", "apikey": self._api_key},
            )
        except httpx.HTTPError as e:
            raise UpstreamError("Identity provider unreachable", cause=e) from e

        if response.status_code in (401, 403):
            raise AuthError("Invalid or expired token.")
        if response.status_code >= 400:
            raise UpstreamError(f"Identity provider returned {response.status_code}")

        try:
            user_id = response.json().get("id")
        except (ValueError, AttributeError) as e:
            raise UpstreamError("Identity provider returned an invalid response", cause=e) from e
        if not user_id:
            raise AuthError("Identity provider returned no user")
        return user_id


class ChainedCredentialVerifier:
    """Tries each verifier in priority order; the first that accepts wins."""

    name = "chain"

    def __init__(self, verifiers: Sequence[CredentialVerifier]) -> None:
        self._verifiers = list(verifiers)

    def verify(self, token: str) -> str:
        if not token:
            raise AuthError("No authorization token provided.")

        upstream_failure: UpstreamError | None = None
        for verifier in self._verifiers:
            try:
                user_id = verifier.verify(token)
            except AuthError:
                continue
            except UpstreamError as e:
                logger.warning(f"Credential verifier {verifier.name} failed: {e}")
                upstream_failure = e
                continue
            logger.debug(f"Authenticated user {user_id} via {verifier.name}")
            return user_id

        if upstream_failure is not None:
            raise upstream_failure
        raise AuthError("Invalid or expired token.")
