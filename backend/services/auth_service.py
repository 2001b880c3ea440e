# backend/services/auth_service.py
"""
Password hashing and admin tokens.

Passwords live in ``users.password`` as bcrypt hashes (``$2a$``/``$2b$``, cost 10),
the same format the marketplace registration and seed scripts write.
Tokens are HS256 JWTs carrying the user id (``sub``) and role.
"""

import logging
from datetime import datetime, timedelta
from typing import Dict, Any, Optional

import bcrypt
import jwt
from sqlalchemy.orm import Session

from config.settings import JWT_SECRET, JWT_ALGORITHM, JWT_EXPIRE_MINUTES
from models.user_model import User

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 10


class AuthError(Exception):
    """Token missing, malformed or expired (HTTP 401)."""


class PermissionDenied(Exception):
    """Authenticated, but not a verified admin (HTTP 403)."""


def _secret(password: str) -> bytes:
    # bcrypt only reads the first 72 bytes
    return password.encode("utf-8")[:72]


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    return bcrypt.hashpw(_secret(password), bcrypt.gensalt(rounds=rounds)).decode("ascii")


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(_secret(password), password_hash.encode("utf-8"))
    except (AttributeError, ValueError):
        logger.warning("Stored password hash is not a bcrypt hash")
        return False


def create_access_token(user: User, expires_minutes: int = JWT_EXPIRE_MINUTES) -> str:
    now = datetime.utcnow()
    payload = {
        "sub": str(user.id),
        "role": user.role,
        "iat": now,
        "exp": now + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    try:
        return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError as e:
        raise AuthError("Token expired") from e
    except jwt.InvalidTokenError as e:
        raise AuthError("Invalid token") from e


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    user = db.query(User).filter(User.email == email).first()
    if not user or not verify_password(password, user.password_hash):
        return None
    return user


def authenticate_admin(db: Session, token: Optional[str]) -> User:
    """Resolve a bearer token to a verified admin user.

    The role claim alone is not trusted: the user row is re-read so that a
    demoted or unverified account loses access before its token expires.
    """
    if not token:
        raise AuthError("Missing token")

    claims = decode_access_token(token)
    try:
        user_id = int(claims.get("sub"))
    except (TypeError, ValueError) as e:
        raise AuthError("Invalid token subject") from e

    user = db.get(User, user_id)
    if user is None:
        raise AuthError("Unknown user")
    if user.role != "admin" or not user.is_verified:
        logger.warning(f"Admin access denied for user {user.id} (role={user.role}, verified={user.is_verified})")
        raise PermissionDenied("Admin access required")
    return user
