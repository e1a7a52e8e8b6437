# storefront/models/__init__.py

from .enums import ErrorType
from .schemas import ImportResultModel


__all__ = [
    "ErrorType",
    "ImportResultModel",
]
