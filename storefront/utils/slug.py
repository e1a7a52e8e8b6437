# storefront/utils/slug.py
import re
from typing import Any, Optional

from sqlalchemy.orm import Session

FALLBACK_SLUG = "product"


def generate_slug(input_string: Optional[str], max_length: Optional[int] = None) -> str:
    """
    Generates a URL-friendly slug from the input string:
    - lowercase
    - every run of characters outside a-z / 0-9 becomes a single hyphen
    - trim leading/trailing hyphens
    - cut to max_length when given
    """
    slug = (input_string or "").lower()
    slug = re.sub(r"[^a-z0-9]+", "-", slug)
    slug = slug.strip("-")
    if max_length is not None and len(slug) > max_length:
        slug = slug[:max_length].rstrip("-")
    return slug


def slug_column_length(orm_class: Any) -> Optional[int]:
    return getattr(orm_class.slug.type, "length", None)


def slug_exists(db: Session, orm_class: Any, slug: str) -> bool:
    return db.query(orm_class.id).filter(orm_class.slug == slug).first() is not None


def unique_slug(db: Session, orm_class: Any, title: Optional[str], fallback: str = FALLBACK_SLUG) -> str:
    """
    Slug for `title` that no row of `orm_class` currently uses.
    Taken slugs get "-1", "-2", ... appended until a free one is found.
    Every candidate fits the slug column; the base is shortened to make room for the suffix.
    """
    max_length = slug_column_length(orm_class)
    base = generate_slug(title, max_length) or fallback
    slug = base
    suffix = 1
    while slug_exists(db, orm_class, slug):
        tail = f"-{suffix}"
        stem = base if max_length is None else base[:max_length - len(tail)].rstrip("-")
        slug = f"{stem or fallback}{tail}"
        suffix += 1
    return slug
