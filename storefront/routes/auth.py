import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from storefront.core.config import settings
from storefront.db.connection import get_db
from storefront.db.models import AdminUserOrm
from storefront.dependencies.auth import get_current_admin
from storefront.models.schemas import (
    AdminUserResponseSchema, ChangePasswordSchema, ChangeUsernameSchema,
    LoginRequestSchema, TokenResponseSchema
)
from storefront.services.auth import authenticate, create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["Authentication"])

MIN_PASSWORD_LENGTH = 6


def _set_session_cookie(response: JSONResponse, token: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        samesite="lax",
        secure=settings.SESSION_COOKIE_SECURE,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        path="/",
    )


@router.post("/login", response_model=TokenResponseSchema)
def login(payload: LoginRequestSchema, db: Session = Depends(get_db)):
    user = authenticate(db, payload.username.strip(), payload.password)
    if not user:
        logger.info(f"Failed login for '{payload.username}'.")
        raise HTTPException(401, "Invalid username or password")
    token = create_access_token(user)
    body = TokenResponseSchema(access_token=token, username=user.username)
    response = JSONResponse(body.model_dump())
    _set_session_cookie(response, token)
    logger.info(f"Admin '{user.username}' logged in.")
    return response


@router.post("/logout")
def logout():
    response = JSONResponse({"success": True})
    response.delete_cookie(settings.SESSION_COOKIE_NAME, path="/")
    return response


@router.get("/me", response_model=AdminUserResponseSchema)
def read_current_admin(admin: AdminUserOrm = Depends(get_current_admin)):
    return admin


@router.post("/change-username")
def change_username(
    payload: ChangeUsernameSchema,
    admin: AdminUserOrm = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    next_username = (payload.new_username or "").strip()
    if not payload.current_password or not next_username:
        raise HTTPException(400, "Current password and new username are required")
    if not verify_password(payload.current_password, admin.password_hash):
        raise HTTPException(401, "Current password is incorrect")
    if next_username == admin.username:
        raise HTTPException(400, "New username must differ from the current one")

    existing = db.query(AdminUserOrm).filter(AdminUserOrm.username == next_username).one_or_none()
    if existing and existing.id != admin.id:
        raise HTTPException(409, "Username already exists")

    previous = admin.username
    admin.username = next_username
    db.commit()
    logger.info(f"Admin '{previous}' renamed to '{next_username}'.")

    # The session token carries the username; reissue it.
    response = JSONResponse({"success": True, "username": next_username})
    _set_session_cookie(response, create_access_token(admin))
    return response


@router.post("/change-password")
def change_password(
    payload: ChangePasswordSchema,
    admin: AdminUserOrm = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    if not payload.current_password or not payload.new_password:
        raise HTTPException(400, "Current password and new password are required")
    if len(payload.new_password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(400, f"New password must be at least {MIN_PASSWORD_LENGTH} characters")
    if not verify_password(payload.current_password, admin.password_hash):
        raise HTTPException(401, "Current password is incorrect")

    admin.password_hash = hash_password(payload.new_password)
    db.commit()
    logger.info(f"Admin '{admin.username}' changed password.")
    return {"success": True}
