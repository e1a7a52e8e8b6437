import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt, JWTError
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from storefront.core.config import settings
from storefront.db.models import AdminUserOrm

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

SECRET_KEY = settings.JWT_SECRET
ALGORITHM = settings.JWT_ALGORITHM

if SECRET_KEY == "change-me-in-production" and settings.ENVIRONMENT == "production":
    logger.warning(
        "Using default JWT_SECRET. This should be overridden via an environment variable "
        "(SECRET_KEY) with a strong, random key for production."
    )


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Safe wrapper around passlib verify; malformed hashes count as a mismatch."""
    try:
        return pwd_context.verify(password, password_hash)
    except (ValueError, TypeError):
        logger.warning("Stored password hash could not be verified (unrecognized format).")
        return False


def create_access_token(user: AdminUserOrm, expires_minutes: Optional[int] = None) -> str:
    expire = datetime.now(tz=timezone.utc) + timedelta(
        minutes=expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    to_encode = {
        "sub": user.username,
        "userId": user.id,
        "exp": expire,
    }
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Claims of a valid, unexpired token; None otherwise."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.info(f"Rejected session token: {e}")
        return None
    if not payload.get("userId"):
        logger.info("Rejected session token without userId claim.")
        return None
    return payload


def authenticate(db: Session, username: str, password: str) -> Optional[AdminUserOrm]:
    user = db.query(AdminUserOrm).filter(AdminUserOrm.username == username).one_or_none()
    if not user or not verify_password(password, user.password_hash):
        return None
    return user


def ensure_default_admin(db: Session) -> Optional[AdminUserOrm]:
    """Create the bootstrap admin from settings when no admin account exists yet."""
    if db.query(AdminUserOrm.id).first() is not None:
        return None
    user = AdminUserOrm(
        username=settings.ADMIN_USERNAME,
        password_hash=hash_password(settings.ADMIN_PASSWORD),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Created bootstrap admin account '{user.username}'.")
    return user
