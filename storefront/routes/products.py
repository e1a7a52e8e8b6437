import json
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.dataload.parsers.spreadsheet_parser import parse_spreadsheet
from storefront.dataload.product_loader import import_products, resolve_import_targets
from storefront.db.connection import get_db
from storefront.db.models import AdminUserOrm, BrandOrm, CategoryOrm, ProductOrm
from storefront.dependencies.auth import get_current_admin
from storefront.exceptions import DataLoaderError, SpreadsheetParseError
from storefront.models.schemas import ImportResultModel, ProductCreateSchema, ProductResponseSchema
from storefront.utils.slug import generate_slug, slug_column_length, slug_exists, unique_slug

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/products", tags=["Products"])


@router.post(
    "/import",
    summary="Import products from an uploaded spreadsheet into one category",
    response_model=ImportResultModel,
)
async def import_products_from_file(
    file: Optional[UploadFile] = File(None),
    category_id: Optional[str] = Form(None, alias="categoryId"),
    brand_id: Optional[str] = Form(None, alias="brandId"),
    admin: AdminUserOrm = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    if file is None or not file.filename:
        raise HTTPException(400, "No file provided")
    category_id = (category_id or "").strip()
    if not category_id:
        raise HTTPException(400, "Category ID is required")
    brand_id = (brand_id or "").strip() or None

    try:
        category, brand = await run_in_threadpool(resolve_import_targets, db, category_id, brand_id)
    except DataLoaderError as e:
        raise HTTPException(404, e.message)

    file_bytes = await file.read()
    try:
        rows = await run_in_threadpool(parse_spreadsheet, file_bytes, file.filename, file.content_type)
    except SpreadsheetParseError as e:
        logger.warning(f"Import by '{admin.username}' rejected: {e.message}")
        raise HTTPException(400, e.message)

    logger.info(f"Import of '{file.filename}' ({len(rows)} rows) started by '{admin.username}'.")
    return await run_in_threadpool(import_products, db, rows, category, brand)


@router.get("", response_model=List[ProductResponseSchema], summary="List active products")
def list_products(
    category_id: Optional[str] = Query(None, alias="categoryId"),
    brand_id: Optional[str] = Query(None, alias="brandId"),
    featured: Optional[bool] = Query(None),
    skip: int = Query(0, ge=0, description="Number of records to skip for pagination"),
    limit: int = Query(50, ge=1, le=200, description="Maximum number of records to return"),
    db: Session = Depends(get_db),
):
    query = db.query(ProductOrm).filter(ProductOrm.active.is_(True))
    if category_id:
        query = query.filter(ProductOrm.category_id == category_id)
    if brand_id:
        query = query.filter(ProductOrm.brand_id == brand_id)
    if featured is not None:
        query = query.filter(ProductOrm.featured.is_(featured))
    return (
        query.order_by(ProductOrm.created_at.desc(), ProductOrm.title)
             .offset(skip)
             .limit(limit)
             .all()
    )


@router.get("/{slug}", response_model=ProductResponseSchema, summary="Get one active product by slug")
def get_product(slug: str, db: Session = Depends(get_db)):
    product = db.query(ProductOrm).filter(ProductOrm.slug == slug).one_or_none()
    if not product or not product.active:
        raise HTTPException(404, "Product not found")
    return product


@router.post("", response_model=ProductResponseSchema, status_code=201, summary="Create a product")
def create_product(
    payload: ProductCreateSchema,
    admin: AdminUserOrm = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    if not db.query(CategoryOrm.id).filter(CategoryOrm.id == payload.category_id).first():
        raise HTTPException(404, "Category not found")
    if payload.brand_id and not db.query(BrandOrm.id).filter(BrandOrm.id == payload.brand_id).first():
        raise HTTPException(404, "Brand not found")

    if payload.slug:
        slug = generate_slug(payload.slug, slug_column_length(ProductOrm))
        if not slug:
            raise HTTPException(400, "Slug must contain letters or digits")
        if slug_exists(db, ProductOrm, slug):
            raise HTTPException(409, "Product slug already exists")
    else:
        slug = unique_slug(db, ProductOrm, payload.title)

    images = [url.strip() for url in payload.images if url and url.strip()]
    bullet_points = [p.strip() for p in payload.bullet_points if p and p.strip()]
    product = ProductOrm(
        title=payload.title,
        slug=slug,
        main_image=images[0] if images else "",
        images=json.dumps(images, ensure_ascii=False),
        price=payload.price,
        amazon_url=payload.amazon_url,
        category_id=payload.category_id,
        brand_id=payload.brand_id,
        bullet_points=json.dumps(bullet_points, ensure_ascii=False),
        description=payload.description,
        published_at=payload.published_at,
        show_buy_on_amazon=payload.show_buy_on_amazon,
        show_add_to_cart=payload.show_add_to_cart,
        active=payload.active,
        featured=payload.featured,
    )
    db.add(product)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Product create conflicted on slug '{slug}': {e}")
        raise HTTPException(409, "Product slug already exists")
    db.refresh(product)
    logger.info(f"Product {product.id} ('{product.slug}') created by '{admin.username}'.")
    return product


@router.delete("/{product_id}", summary="Delete a product")
def delete_product(
    product_id: str,
    admin: AdminUserOrm = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    product = db.query(ProductOrm).filter(ProductOrm.id == product_id).one_or_none()
    if not product:
        raise HTTPException(404, "Product not found")
    db.delete(product)
    db.commit()
    logger.info(f"Product {product_id} deleted by '{admin.username}'.")
    return {"success": True}
