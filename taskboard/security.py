# taskboard/security.py
import logging
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from taskboard.db import get_db
from taskboard.errors import (
    AccountDeactivated,
    ExpiredToken,
    Forbidden,
    InternalFault,
    InvalidCredentials,
    InvalidToken,
    Unauthenticated,
)
from taskboard.models.user import Role, User

log = logging.getLogger("taskboard.security")

# auto_error=False: la ausencia de token la reportamos nosotros con el sobre JSON
bearer_scheme = HTTPBearer(auto_error=False)


# -----------------------------
#   CONTRASEÑAS
# -----------------------------

def hash_password(raw: str) -> str:
    return bcrypt.hashpw(raw.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(raw: str, stored: str) -> bool:
    try:
        return bcrypt.checkpw(raw.encode("utf-8"), stored.encode("utf-8"))
    except ValueError:
        # hash corrupto o con otro formato
        return False


# -----------------------------
#   TOKENS
# -----------------------------

class TokenService:
    """Emite y verifica los JWT firmados con el secreto de la configuración."""

    def __init__(self, secret: str, algorithm: str = "HS256", expires_minutes: int = 60):
        self.secret = secret
        self.algorithm = algorithm
        self.expires_minutes = expires_minutes

    def issue(self, user: User, expires_minutes=None) -> str:
        now = datetime.now(timezone.utc)
        minutes = self.expires_minutes if expires_minutes is None else expires_minutes
        payload = {
            "sub": str(user.id),
            "role": user.role.value,
            "iat": now,
            "exp": now + timedelta(minutes=minutes),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> int:
        """Devuelve el id de usuario del token o lanza InvalidToken / ExpiredToken."""
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            raise ExpiredToken()
        except jwt.InvalidTokenError:
            raise InvalidToken()

        try:
            return int(payload["sub"])
        except (TypeError, ValueError):
            raise InvalidToken()


def get_token_service(request: Request) -> TokenService:
    return request.app.state.tokens


# -----------------------------
#   LOGIN
# -----------------------------

def authenticate(db: Session, email: str, password: str) -> User:
    user = db.query(User).filter(User.email == email.strip().lower()).first()
    # Mismo error para email desconocido y contraseña incorrecta
    if not user or not verify_password(password, user.password_hash):
        raise InvalidCredentials()
    if not user.is_active:
        raise AccountDeactivated()
    return user


# -----------------------------
#   AUTH GUARD
# -----------------------------

def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> User:
    if credentials is None or not credentials.credentials:
        raise Unauthenticated()

    token = credentials.credentials
    try:
        user_id = tokens.verify(token)
    except (InvalidToken, ExpiredToken) as exc:
        log.info("Token rechazado en %s: %s", request.url.path, exc.message)
        raise

    try:
        user = db.get(User, user_id)
    except SQLAlchemyError:
        log.exception("Fallo de base de datos resolviendo el usuario %s", user_id)
        raise InternalFault("Authentication error")

    if user is None:
        raise Unauthenticated("User not found")
    if not user.is_active:
        raise AccountDeactivated()

    request.state.user = user
    request.state.token = token
    return user


# -----------------------------
#   ROLE GUARD
# -----------------------------

def require_role(role: Role):
    """
    Dependencia que deja pasar solo a usuarios con `role`.
    Va siempre detrás de get_current_user; si no hay identidad, 401.
    """

    def guard(request: Request, current_user: User = Depends(get_current_user)) -> User:
        try:
            check_role(current_user, role)
        except Forbidden:
            log.info("Usuario %s sin rol %s en %s", current_user.id, role.value, request.url.path)
            raise
        return current_user

    return guard


def check_role(user, role: Role) -> None:
    """Versión sin FastAPI del role guard, para usar fuera de las rutas."""
    if user is None:
        raise Unauthenticated()
    if user.role != role:
        raise Forbidden()
