import uuid

import sqlalchemy as sa
from sqlalchemy import (
    Column, Integer, String, DateTime, Float, Boolean, ForeignKey,
    Index, Text, LargeBinary
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func # For server-side default timestamps

from .base_class import Base


def generate_id() -> str:
    return uuid.uuid4().hex


# --- Catalog taxonomy ---
class CategoryOrm(Base):
    __tablename__ = "categories"

    id = Column(String(32), primary_key=True, default=generate_id)
    name = Column(String(150), nullable=False)
    slug = Column(String(191), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    image = Column(String(500), nullable=True)
    sort_order = Column(Integer, nullable=False, default=0, server_default="0")

    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    products = relationship("ProductOrm", back_populates="category")


class BrandOrm(Base):
    __tablename__ = "brands"

    id = Column(String(32), primary_key=True, default=generate_id)
    name = Column(String(150), index=True, nullable=False)
    slug = Column(String(191), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    image = Column(String(500), nullable=True)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    products = relationship("ProductOrm", back_populates="brand")


# --- Product Model ---
class ProductOrm(Base):
    __tablename__ = "products"

    id = Column(String(32), primary_key=True, default=generate_id)
    title = Column(String(500), nullable=False)
    # Uniqueness is enforced here as well as by the loader's suffixing.
    slug = Column(String(191), nullable=False, unique=True, index=True)
    main_image = Column(String(1000), nullable=False, default="", server_default="")
    images = Column(Text, nullable=False, default="[]", server_default="[]") # JSON list of URLs
    price = Column(Float, nullable=False)
    amazon_url = Column(String(2000), nullable=True)
    bullet_points = Column(Text, nullable=False, default="[]", server_default="[]") # JSON list, 0-5 entries
    description = Column(Text, nullable=False, default="", server_default="")
    published_at = Column(DateTime, nullable=True)

    show_buy_on_amazon = Column(Boolean, nullable=False, default=True, server_default=sa.true())
    show_add_to_cart = Column(Boolean, nullable=False, default=True, server_default=sa.true())
    active = Column(Boolean, nullable=False, default=True, server_default=sa.true())
    featured = Column(Boolean, nullable=False, default=False, server_default=sa.false())

    category_id = Column(String(32), ForeignKey("categories.id"), nullable=False, index=True)
    brand_id = Column(String(32), ForeignKey("brands.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    category = relationship("CategoryOrm", back_populates="products")
    brand = relationship("BrandOrm", back_populates="products")

    __table_args__ = (
        Index('idx_product_category_active', "category_id", "active"),
    )


# --- Customer messages ---
class MessageOrm(Base):
    __tablename__ = "messages"

    id = Column(String(32), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    email = Column(String(320), nullable=False)
    subject = Column(String(500), nullable=False, default="", server_default="")
    country = Column(String(120), nullable=False, default="", server_default="")
    order_no = Column(String(120), nullable=False, default="", server_default="")
    message = Column(Text, nullable=False)
    read = Column(Boolean, nullable=False, default=False, server_default=sa.false())

    created_at = Column(DateTime, server_default=func.now(), nullable=False, index=True)


# --- Site settings (key/value rows merged over defaults at read time) ---
class SiteSettingOrm(Base):
    __tablename__ = "site_settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    key = Column(String(120), nullable=False, unique=True, index=True)
    value = Column(Text, nullable=False, default="", server_default="")

    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)


# --- Uploaded images, stored in the database ---
class ImageOrm(Base):
    __tablename__ = "images"

    id = Column(String(32), primary_key=True, default=generate_id)
    filename = Column(String(255), nullable=False)
    content_type = Column(String(120), nullable=False)
    size = Column(Integer, nullable=False)
    data = Column(LargeBinary, nullable=False)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)


# --- Admin accounts ---
class AdminUserOrm(Base):
    __tablename__ = "admin_users"

    id = Column(String(32), primary_key=True, default=generate_id)
    username = Column(String(150), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)
