"""Single-admin authentication: credential check and signed session tokens."""

from __future__ import annotations

import hmac
import logging
import time
from typing import Any

from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTError

from app.core.config import Settings
from app.core.exceptions import AuthenticationError, ValidationError
from app.models.auth import AdminCredentials, AdminIdentity

logger = logging.getLogger(__name__)

_SECONDS_PER_DAY = 24 * 60 * 60


class AccessGate:
    def __init__(
        self,
        admin: AdminCredentials,
        secret: str,
        *,
        max_age_days: int = 7,
        algorithm: str = "HS256",
    ) -> None:
        if not admin.email or not admin.password:
            raise ValueError("Admin email and password must be configured")
        if not secret:
            raise ValueError("JWT secret must be configured")
        self.admin = admin
        self.secret = secret
        self.max_age_days = max_age_days
        self.algorithm = algorithm

    @classmethod
    def from_settings(cls, settings: Settings) -> AccessGate:
        return cls(
            AdminCredentials(email=settings.ADMIN_EMAIL, password=settings.ADMIN_PASSWORD),
            settings.JWT_SECRET,
            max_age_days=settings.SESSION_MAX_AGE_DAYS,
            algorithm=settings.JWT_ALGORITHM,
        )

    @property
    def max_age_seconds(self) -> int:
        return self.max_age_days * _SECONDS_PER_DAY

    def login(self, email: str | None, password: str | None) -> str:
        if not email or not password:
            raise ValidationError("Email and password are required")

        email_ok = email.strip().lower() == self.admin.email.strip().lower()
        password_ok = hmac.compare_digest(password.encode(), self.admin.password.encode())
        if not (email_ok and password_ok):
            logger.warning("Rejected admin login attempt")
            raise AuthenticationError("Invalid credentials")

        return self.issue_token()

    def issue_token(self, now: float | None = None) -> str:
        issued_at = int(now if now is not None else time.time())
        claims: dict[str, Any] = {
            "sub": self.admin.email,
            "iat": issued_at,
            "exp": issued_at + self.max_age_seconds,
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def verify(self, token: str | None) -> AdminIdentity:
        if not token:
            raise AuthenticationError()

        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require_exp": True, "require_sub": True},
            )
        except ExpiredSignatureError as e:
            logger.info("Rejected expired session token")
            raise AuthenticationError() from e
        except JWTError as e:
            raise AuthenticationError() from e

        if payload.get("sub") != self.admin.email:
            raise AuthenticationError()

        return AdminIdentity(email=self.admin.email)
