import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.db.connection import get_db
from storefront.db.models import AdminUserOrm, CategoryOrm, ProductOrm
from storefront.dependencies.auth import get_current_admin
from storefront.models.schemas import CategoryCreateSchema, CategoryResponseSchema, NavItemSchema
from storefront.utils.slug import generate_slug, slug_column_length

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Categories"])


def _ordered_categories(db: Session) -> List[CategoryOrm]:
    return db.query(CategoryOrm).order_by(CategoryOrm.sort_order, CategoryOrm.name).all()


def _resolve_slug(db: Session, payload: CategoryCreateSchema, category_id: Optional[str] = None) -> str:
    slug = generate_slug(payload.slug or payload.name, slug_column_length(CategoryOrm))
    if not slug:
        raise HTTPException(400, "Slug must contain letters or digits")
    existing = db.query(CategoryOrm).filter(CategoryOrm.slug == slug).one_or_none()
    if existing and existing.id != category_id:
        raise HTTPException(409, "Category slug already exists")
    return slug


@router.get("/categories", response_model=List[CategoryResponseSchema])
def list_categories(db: Session = Depends(get_db)):
    return _ordered_categories(db)


@router.get("/categories/{category_id}", response_model=CategoryResponseSchema)
def get_category(category_id: str, db: Session = Depends(get_db)):
    category = db.query(CategoryOrm).filter(CategoryOrm.id == category_id).one_or_none()
    if not category:
        raise HTTPException(404, "Category not found")
    return category


@router.post("/categories", response_model=CategoryResponseSchema, status_code=201)
def create_category(
    payload: CategoryCreateSchema,
    admin: AdminUserOrm = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    slug = _resolve_slug(db, payload)
    category = CategoryOrm(
        name=payload.name,
        slug=slug,
        description=payload.description,
        image=payload.image,
        sort_order=payload.sort_order,
    )
    db.add(category)
    db.commit()
    db.refresh(category)
    logger.info(f"Category {category.id} ('{slug}') created by '{admin.username}'.")
    return category


@router.put("/categories/{category_id}", response_model=CategoryResponseSchema)
def update_category(
    category_id: str,
    payload: CategoryCreateSchema,
    admin: AdminUserOrm = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    category = db.query(CategoryOrm).filter(CategoryOrm.id == category_id).one_or_none()
    if not category:
        raise HTTPException(404, "Category not found")
    category.slug = _resolve_slug(db, payload, category_id=category.id)
    category.name = payload.name
    category.description = payload.description
    category.image = payload.image
    category.sort_order = payload.sort_order
    db.commit()
    db.refresh(category)
    return category


@router.delete("/categories/{category_id}")
def delete_category(
    category_id: str,
    admin: AdminUserOrm = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    category = db.query(CategoryOrm).filter(CategoryOrm.id == category_id).one_or_none()
    if not category:
        raise HTTPException(404, "Category not found")
    product_count = db.query(ProductOrm).filter(ProductOrm.category_id == category_id).count()
    if product_count:
        raise HTTPException(409, f"Category still has {product_count} product(s); move or delete them first")
    db.delete(category)
    db.commit()
    logger.info(f"Category {category_id} deleted by '{admin.username}'.")
    return {"success": True}


@router.get("/navigation", response_model=List[NavItemSchema])
def get_navigation(db: Session = Depends(get_db)):
    """Storefront navigation: one entry per category, in display order."""
    return [
        NavItemSchema(name=category.name, href=f"/category/{category.slug}")
        for category in _ordered_categories(db)
    ]
