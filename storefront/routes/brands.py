import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.db.connection import get_db
from storefront.db.models import AdminUserOrm, BrandOrm, ProductOrm
from storefront.dependencies.auth import get_current_admin
from storefront.models.schemas import BrandCreateSchema, BrandResponseSchema
from storefront.utils.slug import generate_slug, slug_column_length

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/brands", tags=["Brands"])


def _resolve_slug(db: Session, payload: BrandCreateSchema, brand_id: Optional[str] = None) -> str:
    slug = generate_slug(payload.slug or payload.name, slug_column_length(BrandOrm))
    if not slug:
        raise HTTPException(400, "Slug must contain letters or digits")
    existing = db.query(BrandOrm).filter(BrandOrm.slug == slug).one_or_none()
    if existing and existing.id != brand_id:
        raise HTTPException(409, "Brand slug already exists")
    return slug


@router.get("", response_model=List[BrandResponseSchema])
def list_brands(db: Session = Depends(get_db)):
    return db.query(BrandOrm).order_by(BrandOrm.name).all()


@router.get("/{brand_id}", response_model=BrandResponseSchema)
def get_brand(brand_id: str, db: Session = Depends(get_db)):
    brand = db.query(BrandOrm).filter(BrandOrm.id == brand_id).one_or_none()
    if not brand:
        raise HTTPException(404, "Brand not found")
    return brand


@router.post("", response_model=BrandResponseSchema, status_code=201)
def create_brand(
    payload: BrandCreateSchema,
    admin: AdminUserOrm = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    slug = _resolve_slug(db, payload)
    brand = BrandOrm(name=payload.name, slug=slug, description=payload.description, image=payload.image)
    db.add(brand)
    db.commit()
    db.refresh(brand)
    logger.info(f"Brand {brand.id} ('{slug}') created by '{admin.username}'.")
    return brand


@router.put("/{brand_id}", response_model=BrandResponseSchema)
def update_brand(
    brand_id: str,
    payload: BrandCreateSchema,
    admin: AdminUserOrm = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    brand = db.query(BrandOrm).filter(BrandOrm.id == brand_id).one_or_none()
    if not brand:
        raise HTTPException(404, "Brand not found")
    brand.slug = _resolve_slug(db, payload, brand_id=brand.id)
    brand.name = payload.name
    brand.description = payload.description
    brand.image = payload.image
    db.commit()
    db.refresh(brand)
    return brand


@router.delete("/{brand_id}")
def delete_brand(
    brand_id: str,
    admin: AdminUserOrm = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    brand = db.query(BrandOrm).filter(BrandOrm.id == brand_id).one_or_none()
    if not brand:
        raise HTTPException(404, "Brand not found")
    # Products keep existing without a brand.
    detached = (
        db.query(ProductOrm)
          .filter(ProductOrm.brand_id == brand_id)
          .update({ProductOrm.brand_id: None}, synchronize_session=False)
    )
    db.delete(brand)
    db.commit()
    logger.info(f"Brand {brand_id} deleted by '{admin.username}'; {detached} product(s) detached.")
    return {"success": True}
