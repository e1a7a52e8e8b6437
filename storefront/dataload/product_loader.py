import json
import logging
import math
import re
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from storefront.core.config import settings
from storefront.db.models import ProductOrm, CategoryOrm, BrandOrm
from storefront.dataload.models.product_row import ProductImportRow
from storefront.dataload.parsers.spreadsheet_parser import ParsedRow
from storefront.exceptions import DataLoaderError
from storefront.models.enums import ErrorType
from storefront.models.schemas import ImportResultModel
from storefront.utils.date_utils import ServerDateTime, parse_release_date
from storefront.utils.slug import slug_exists, unique_slug

logger = logging.getLogger(__name__)

IMAGE_SEPARATORS = re.compile(r"[\s,]+")
THOUSANDS_GROUPED = re.compile(r"^\d{1,3}(,\d{3})+(\.\d+)?$")


def resolve_import_targets(
    db: Session,
    category_id: str,
    brand_id: Optional[str] = None,
) -> Tuple[CategoryOrm, Optional[BrandOrm]]:
    """Look up the category (required) and brand (optional) every imported row is attached to."""
    category = db.query(CategoryOrm).filter(CategoryOrm.id == category_id).one_or_none()
    if not category:
        raise DataLoaderError(
            message=f"Category '{category_id}' not found.",
            error_type=ErrorType.LOOKUP, field_name="categoryId", offending_value=category_id
        )
    brand: Optional[BrandOrm] = None
    if brand_id:
        brand = db.query(BrandOrm).filter(BrandOrm.id == brand_id).one_or_none()
        if not brand:
            raise DataLoaderError(
                message=f"Brand '{brand_id}' not found.",
                error_type=ErrorType.LOOKUP, field_name="brandId", offending_value=brand_id
            )
    return category, brand


def parse_images(image_str: Optional[str]) -> List[str]:
    """
    Image URLs from the `images` column.
    A value starting with '[' is read as a JSON array; anything else (or JSON
    that fails to parse) is split on whitespace and commas.
    """
    if not image_str:
        return []
    text = image_str.strip()
    if text.startswith("["):
        try:
            decoded = json.loads(text)
        except ValueError:
            logger.debug(f"images value looked like JSON but did not parse: '{text[:80]}'")
            decoded = None
        if isinstance(decoded, list):
            return [str(item).strip() for item in decoded if item is not None and str(item).strip()]
    return [part for part in IMAGE_SEPARATORS.split(text) if part]


def parse_price(raw_price: Optional[str]) -> Optional[float]:
    """Non-negative finite float, or None when the text is not a usable price."""
    if raw_price is None:
        return None
    text = raw_price.strip()
    if THOUSANDS_GROUPED.match(text):
        text = text.replace(",", "")
    try:
        price = float(text)
    except ValueError:
        return None
    if not math.isfinite(price) or price < 0:
        return None
    return price


def _describe_raw_row(raw: Dict[str, Any]) -> str:
    present = {k: v for k, v in raw.items() if v is not None and str(v).strip() != ""}
    return json.dumps(present, default=str, ensure_ascii=False)


def load_product_row_to_db(
    db: Session,
    row_number: int,
    row: ProductImportRow,
    raw: Dict[str, Any],
    category: CategoryOrm,
    brand: Optional[BrandOrm],
    warnings: List[str],
) -> ProductOrm:
    """
    Validate, normalise and persist one imported row. Commits on success.
    Raises DataLoaderError for anything that keeps the row out of the catalog.
    """
    log_prefix = f"[ImportRow {row_number}]"

    # --- Step 1: required fields ---
    missing = row.missing_required_fields()
    if missing:
        raise DataLoaderError(
            message=f"Row {row_number} missing required fields ({', '.join(missing)}): {_describe_raw_row(raw)}",
            error_type=ErrorType.VALIDATION, field_name=missing[0]
        )

    # --- Step 2: price ---
    price = parse_price(row.price)
    if price is None:
        raise DataLoaderError(
            message=f"Row {row_number}: Invalid price for product: {row.title}",
            error_type=ErrorType.VALIDATION, field_name="price", offending_value=row.price
        )

    # --- Step 3: images, bullet points, release date ---
    images = parse_images(row.images)
    main_image = images[0] if images else ""
    bullet_points = row.bullet_points()

    published_at = None
    if row.release_date is not None:
        published_at = parse_release_date(row.release_date)
        if published_at is None:
            published_at = ServerDateTime.now()
            note = (
                f"Row {row_number} ({row.title}): unrecognized release_date '{row.release_date}', "
                f"published date set to import time"
            )
            logger.warning(f"{log_prefix} {note}")
            warnings.append(note)

    # --- Step 4: slug + persistence ---
    attempts = max(1, settings.SLUG_CONFLICT_RETRIES)
    for attempt in range(1, attempts + 1):
        slug = unique_slug(db, ProductOrm, row.title)
        product = ProductOrm(
            title=row.title,
            slug=slug,
            main_image=main_image,
            images=json.dumps(images, ensure_ascii=False),
            price=price,
            amazon_url=row.url,
            category_id=category.id,
            brand_id=brand.id if brand else None,
            bullet_points=json.dumps(bullet_points, ensure_ascii=False),
            description=row.description or "",
            published_at=published_at,
            show_buy_on_amazon=True,
            show_add_to_cart=True,
            active=True,
            featured=False,
        )
        db.add(product)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            if slug_exists(db, ProductOrm, slug):
                # Another writer claimed the slug between our check and the insert.
                logger.warning(f"{log_prefix} Slug '{slug}' taken concurrently (attempt {attempt}/{attempts}); retrying.")
                continue
            logger.error(f"{log_prefix} Integrity error: {e}", exc_info=True)
            raise DataLoaderError(
                message=f"Error processing {row.title}: {e.orig}",
                error_type=ErrorType.DATABASE, offending_value=row.title, original_exception=e
            )
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"{log_prefix} Database error: {e}", exc_info=True)
            raise DataLoaderError(
                message=f"Error processing {row.title}: {e}",
                error_type=ErrorType.DATABASE, offending_value=row.title, original_exception=e
            )
        logger.debug(f"{log_prefix} Created product {product.id} with slug '{slug}'.")
        return product

    raise DataLoaderError(
        message=f"Error processing {row.title}: could not allocate a unique slug after {attempts} attempts",
        error_type=ErrorType.DATABASE, field_name="slug", offending_value=row.title
    )


def import_products(
    db: Session,
    rows: List[ParsedRow],
    category: CategoryOrm,
    brand: Optional[BrandOrm] = None,
) -> ImportResultModel:
    """
    Load parsed spreadsheet rows as products, one row at a time, in file order.
    A failing row is recorded in the result and never stops the batch.
    """
    logger.info(
        f"Starting product import of {len(rows)} rows into category {category.id}"
        f"{f' / brand {brand.id}' if brand else ''}."
    )
    result = ImportResultModel()

    for row_number, raw in rows:
        title_for_log = raw.get("title") or f"row_{row_number}"
        try:
            try:
                row = ProductImportRow.from_cells(raw)
            except ValidationError as ve:
                raise DataLoaderError(
                    message=f"Row {row_number}: unreadable cell values: {ve.errors()[0].get('msg', ve)}",
                    error_type=ErrorType.FILE_FORMAT, original_exception=ve
                )
            load_product_row_to_db(db, row_number, row, raw, category, brand, result.warnings)
            result.success += 1
        except DataLoaderError as e:
            logger.warning(f"[ImportRow {row_number}] Skipped '{title_for_log}': {e}")
            result.failed += 1
            result.errors.append(e.message)
        except Exception as e:
            db.rollback()
            err = DataLoaderError(
                message=f"Error processing {raw.get('title') or 'unknown'}: {e}",
                error_type=ErrorType.UNEXPECTED_ROW_ERROR, original_exception=e
            )
            logger.error(f"[ImportRow {row_number}] Unexpected exception. Raw data: {raw}. {err}", exc_info=True)
            result.failed += 1
            result.errors.append(err.message)

    logger.info(
        f"Finished product import into category {category.id}. "
        f"Summary: success={result.success} failed={result.failed} warnings={len(result.warnings)}"
    )
    return result
