import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from storefront.core.config import settings
from storefront.db.connection import get_db
from storefront.db.models import AdminUserOrm
from storefront.services.auth import decode_access_token

logger = logging.getLogger(__name__)

# The cookie set by /api/auth/login is the primary credential; a bearer
# header is accepted for API clients.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_current_admin(
    request: Request,
    bearer_token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> AdminUserOrm:
    """
    Resolve the session credential to an admin account.
    Raises 401 when the token is missing, invalid, expired, or its user is gone.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )

    token = request.cookies.get(settings.SESSION_COOKIE_NAME) or bearer_token
    if not token:
        raise credentials_exception

    payload = decode_access_token(token)
    if payload is None:
        raise credentials_exception

    user = db.query(AdminUserOrm).filter(AdminUserOrm.id == str(payload["userId"])).one_or_none()
    if user is None:
        logger.warning(f"Session token refers to missing admin id {payload['userId']}.")
        raise credentials_exception
    return user
