# Copyright (c) 2023, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""Bearer token authorization.

The basket service never parses tokens itself: it depends on a TokenVerifier
injected at application construction, which turns a bearer token into a
verified caller Identity.
"""

import abc
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

if TYPE_CHECKING:  # pragma: no cover
    from basketsvc.settings import BasketSettings

__all__ = [
    "Identity",
    "AuthenticationError",
    "TokenVerifier",
    "JwtTokenVerifier",
    "require_identity",
]

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Identity:
    """A verified caller."""

    subject: str
    claims: dict[str, Any] = field(default_factory=dict, compare=False)


class AuthenticationError(Exception):
    """Raised when a bearer token cannot be verified."""


class TokenVerifier(abc.ABC):
    @abc.abstractmethod
    def verify(self, token: str) -> Identity:
        """Returns the identity carried by token.

        Raises:
            AuthenticationError if the token is not valid.
        """


class JwtTokenVerifier(TokenVerifier):
    """Verify JWT bearer tokens issued by an external identity provider.

    Tokens signed with an asymmetric key (RS256 by default) are checked with
    the provider JWKS; a shared secret is used instead when given (HS256).
    The issuer and audience claims are checked when configured.
    """

    def __init__(
        self,
        *,
        issuer: str = "",
        audience: str = "",
        algorithms: Optional[list[str]] = None,
        secret: str = "",
        jwks_url: str = "",
        identity_claim: str = "sub",
    ) -> None:
        self.issuer = issuer
        self.audience = audience
        self.secret = secret
        self.algorithms = algorithms or (["HS256"] if secret else ["RS256"])
        self.identity_claim = identity_claim

        self._jwks_client: Optional[jwt.PyJWKClient] = None
        if not secret:
            if not jwks_url and issuer:
                jwks_url = f"{issuer.rstrip('/')}/.well-known/jwks.json"
            if jwks_url:
                self._jwks_client = jwt.PyJWKClient(jwks_url)
        self.jwks_url = jwks_url

    @classmethod
    def from_settings(cls, settings: "BasketSettings") -> "JwtTokenVerifier":
        return cls(
            issuer=settings.auth_issuer,
            audience=settings.auth_audience,
            algorithms=settings.auth_algorithms,
            secret=settings.auth_secret,
            jwks_url=settings.auth_jwks_url,
            identity_claim=settings.auth_identity_claim,
        )

    def _signing_key(self, token: str) -> Any:
        if self.secret:
            return self.secret
        if self._jwks_client is None:
            raise AuthenticationError("No token signing key configured")
        try:
            return self._jwks_client.get_signing_key_from_jwt(token).key
        except jwt.PyJWKClientError as exc:
            raise AuthenticationError(f"Cannot get the token signing key: {exc}") from exc

    def verify(self, token: str) -> Identity:
        key = self._signing_key(token)
        options = {
            "require": ["exp"],
            "verify_aud": bool(self.audience),
            "verify_iss": bool(self.issuer),
        }
        try:
            claims = jwt.decode(
                token,
                key,
                algorithms=self.algorithms,
                audience=self.audience or None,
                issuer=self.issuer or None,
                options=options,
            )
        except jwt.InvalidTokenError as exc:
            raise AuthenticationError(str(exc)) from exc

        subject = claims.get(self.identity_claim)
        if not subject:
            raise AuthenticationError(f"Token has no '{self.identity_claim}' claim")
        return Identity(subject=str(subject), claims=claims)


def get_token_verifier(request: Request) -> TokenVerifier:
    return request.app.state.token_verifier


def require_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> Identity:
    """FastAPI dependency rejecting the requests without a valid bearer token."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        identity = verifier.verify(credentials.credentials)
    except AuthenticationError as exc:
        logger.info("Bearer token rejected: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc
    return identity
