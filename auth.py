"""
Session/Auth gateway.

Ambassadors authenticate with email and password through an AuthProvider
handed to the gateway when the app is built. A successful login returns a
JWT for API clients and also records the ambassador in the signed session
cookie, which is what identifies them when Stripe redirects the browser back
to the linking callback.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from fastapi import Depends, HTTPException, Request, status
from jose import JWTError, jwt
from sqlalchemy.orm import Session

import config
from database import get_session
from models import Ambassador
from services.ledger_service import LedgerService

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "ambassador_id"


class AuthProvider:
    """Checks login credentials and returns the matching ambassador."""

    def authenticate(self, db: Session, email: str, password: str) -> Optional[Ambassador]:
        raise NotImplementedError


class PasswordAuthProvider(AuthProvider):
    """Email + bcrypt password login."""

    def authenticate(self, db: Session, email: str, password: str) -> Optional[Ambassador]:
        ambassador = LedgerService.find_ambassador_by_email(db, email)
        if not ambassador:
            logger.info("Login failed: unknown email")
            return None
        if not ambassador.validate_password(password):
            logger.info("Login failed: invalid password for ambassador id=%s", ambassador.id)
            return None
        return ambassador


class AuthGateway:
    def __init__(
        self,
        provider: AuthProvider,
        secret_key: str = config.JWT_SECRET,
        algorithm: str = config.JWT_ALGORITHM,
        expire_minutes: int = config.ACCESS_TOKEN_EXPIRE_MINUTES,
    ):
        self.provider = provider
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def issue_token(self, ambassador: Ambassador) -> str:
        expires = datetime.now(timezone.utc) + timedelta(minutes=self.expire_minutes)
        return jwt.encode({"id": ambassador.id, "exp": expires}, self.secret_key, algorithm=self.algorithm)

    def login(self, db: Session, request: Request, email: str, password: str) -> Optional[Tuple[Ambassador, str]]:
        ambassador = self.provider.authenticate(db, email, password)
        if ambassador is None:
            return None
        self.start_session(request, ambassador)
        return ambassador, self.issue_token(ambassador)

    def start_session(self, request: Request, ambassador: Ambassador) -> None:
        request.session[SESSION_USER_KEY] = ambassador.id

    def logout(self, request: Request) -> None:
        request.session.clear()

    def _token_ambassador_id(self, request: Request) -> Optional[int]:
        auth = request.headers.get("Authorization")
        if not auth or not auth.startswith("Bearer "):
            return None
        token = auth.split(" ", 1)[1]
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            raise HTTPException(status_code=403, detail="Invalid token")
        return payload.get("id")

    def resolve(self, request: Request, db: Session) -> Optional[Ambassador]:
        """Current ambassador from the bearer token, falling back to the session cookie."""
        ambassador_id = self._token_ambassador_id(request)
        if ambassador_id is None:
            ambassador_id = request.session.get(SESSION_USER_KEY)
        if ambassador_id is None:
            return None
        return db.query(Ambassador).filter(Ambassador.id == ambassador_id).first()


def get_auth_gateway(request: Request) -> AuthGateway:
    return request.app.state.auth_gateway


def get_current_ambassador(
    request: Request,
    db: Session = Depends(get_session),
    gateway: AuthGateway = Depends(get_auth_gateway),
) -> Ambassador:
    ambassador = gateway.resolve(request, db)
    if ambassador is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return ambassador


def get_optional_ambassador(
    request: Request,
    db: Session = Depends(get_session),
    gateway: AuthGateway = Depends(get_auth_gateway),
) -> Optional[Ambassador]:
    return gateway.resolve(request, db)
