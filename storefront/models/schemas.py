import json
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for API payloads: camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# --- Import ---

class ImportResultModel(BaseModel):
    success: int = 0
    failed: int = 0
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


# --- Categories / Brands ---

class CategoryCreateSchema(ApiModel):
    name: str = Field(..., min_length=1, max_length=150)
    slug: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    sort_order: int = 0

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class CategoryResponseSchema(ApiModel):
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    image: Optional[str] = None
    sort_order: int = 0


class BrandCreateSchema(ApiModel):
    name: str = Field(..., min_length=1, max_length=150)
    slug: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class BrandResponseSchema(ApiModel):
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    image: Optional[str] = None


class NavItemSchema(BaseModel):
    name: str
    href: str


# --- Products ---

class ProductCreateSchema(ApiModel):
    title: str = Field(..., min_length=1, max_length=500)
    slug: Optional[str] = None
    price: float = Field(..., ge=0)
    amazon_url: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    bullet_points: List[str] = Field(default_factory=list, max_length=5)
    description: str = ""
    category_id: str
    brand_id: Optional[str] = None
    published_at: Optional[datetime] = None
    show_buy_on_amazon: bool = True
    show_add_to_cart: bool = True
    active: bool = True
    featured: bool = False


class ProductResponseSchema(ApiModel):
    id: str
    title: str
    slug: str
    main_image: str
    images: List[str]
    price: float
    amazon_url: Optional[str] = None
    category_id: str
    brand_id: Optional[str] = None
    bullet_points: List[str]
    description: str
    published_at: Optional[datetime] = None
    show_buy_on_amazon: bool
    show_add_to_cart: bool
    active: bool
    featured: bool

    @field_validator("images", "bullet_points", mode="before")
    @classmethod
    def decode_json_list(cls, v):
        # ORM rows hold these as JSON text
        if isinstance(v, str):
            try:
                decoded = json.loads(v) if v else []
            except ValueError:
                return []
            return decoded if isinstance(decoded, list) else []
        return v


# --- Messages ---

class MessageCreateSchema(ApiModel):
    """Fields are optional so the route can report missing ones itself."""
    name: Optional[str] = None
    email: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None
    country: Optional[str] = None
    order_no: Optional[str] = None


class MessageResponseSchema(ApiModel):
    id: str
    name: str
    email: str
    subject: str
    country: str
    order_no: str
    message: str
    read: bool
    created_at: datetime


class MessageReadUpdateSchema(BaseModel):
    read: bool = False


class MessageCreatedResponse(BaseModel):
    message: str
    id: str


# --- Auth ---

class LoginRequestSchema(BaseModel):
    username: str
    password: str


class TokenResponseSchema(BaseModel):
    access_token: str
    token_type: str = "bearer"
    username: str


class AdminUserResponseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str


class ChangeUsernameSchema(ApiModel):
    current_password: Optional[str] = None
    new_username: Optional[str] = None


class ChangePasswordSchema(ApiModel):
    current_password: Optional[str] = None
    new_password: Optional[str] = None


# --- Uploads ---

class ImageUploadResponseSchema(BaseModel):
    id: str
    url: str


# --- Site ---

class ScriptTagSchema(BaseModel):
    src: Optional[str] = None
    content: str = ""
    attrs: Dict[str, str] = Field(default_factory=dict)


class SiteMetadataSchema(BaseModel):
    title: str
    description: str
    keywords: str
    other: Dict[str, str] = Field(default_factory=dict)


class AnalyticsInjectionSchema(BaseModel):
    head_scripts: List[ScriptTagSchema] = Field(default_factory=list)
    body_scripts: List[ScriptTagSchema] = Field(default_factory=list)
    body_html: str = ""


class SiteResponseSchema(BaseModel):
    settings: Dict[str, Any]
    metadata: SiteMetadataSchema
    analytics: AnalyticsInjectionSchema
