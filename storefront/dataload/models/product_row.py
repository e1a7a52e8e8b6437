from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

REQUIRED_FIELDS = ("title", "price", "url")
BULLET_POINT_FIELDS = tuple(f"bullet_point_{i}" for i in range(1, 6))


def _cell_to_text(value: Any) -> Optional[str]:
    """Spreadsheet cell -> stripped text, with blanks collapsed to None."""
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        text = str(int(value)) if abs(value) < 1e15 else str(value)
    else:
        text = str(value)
    text = text.strip()
    return text or None


class ProductImportRow(BaseModel):
    """
    One decoded row of a product import sheet.

    Every field is optional at this stage; presence of the required ones is
    checked explicitly by the loader so it can report the raw row content.
    """
    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    price: Optional[str] = None
    url: Optional[str] = None
    images: Optional[str] = None
    bullet_point_1: Optional[str] = None
    bullet_point_2: Optional[str] = None
    bullet_point_3: Optional[str] = None
    bullet_point_4: Optional[str] = None
    bullet_point_5: Optional[str] = None
    description: Optional[str] = None
    release_date: Optional[Any] = None

    @field_validator(
        "title", "price", "url", "images", "description", *BULLET_POINT_FIELDS,
        mode="before",
    )
    @classmethod
    def coerce_text(cls, v):
        return _cell_to_text(v)

    @field_validator("release_date", mode="before")
    @classmethod
    def blank_release_date_to_none(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return v

    @classmethod
    def from_cells(cls, cells: Dict[str, Any]) -> "ProductImportRow":
        return cls.model_validate(cells)

    def missing_required_fields(self) -> List[str]:
        return [name for name in REQUIRED_FIELDS if getattr(self, name) is None]

    def bullet_points(self) -> List[str]:
        """Present, non-empty bullet points in column order; gaps are skipped."""
        return [value for value in (getattr(self, f) for f in BULLET_POINT_FIELDS) if value is not None]
