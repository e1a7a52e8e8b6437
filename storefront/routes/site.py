import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.db.connection import get_db
from storefront.db.models import AdminUserOrm
from storefront.dependencies.auth import get_current_admin
from storefront.models.schemas import SiteResponseSchema
from storefront.services.site_settings import load_site_config, save_site_settings

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Site"])

MAX_SETTING_KEY_LENGTH = 120


@router.get("/settings", response_model=Dict[str, str], summary="Effective settings (stored rows over defaults)")
def read_settings(
    admin: AdminUserOrm = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return load_site_config(db).as_dict()


@router.put("/settings", response_model=Dict[str, str], summary="Update site settings")
def update_settings(
    updates: Dict[str, Any] = Body(...),
    admin: AdminUserOrm = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    for key, value in updates.items():
        if not key or len(key) > MAX_SETTING_KEY_LENGTH:
            raise HTTPException(400, f"Invalid setting key: '{key[:40]}'")
        if isinstance(value, (dict, list)):
            raise HTTPException(400, f"Setting '{key}' must be a plain value")
    logger.info(f"Settings update by '{admin.username}'.")
    return save_site_settings(db, updates).as_dict()


@router.get("/site", response_model=SiteResponseSchema, summary="Public site configuration for rendering")
def read_site(db: Session = Depends(get_db)):
    site = load_site_config(db)
    return SiteResponseSchema(
        settings=site.public_dict(),
        metadata=site.metadata(),
        analytics=site.analytics(),
    )
