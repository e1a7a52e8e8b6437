from typing import Optional, Any
from storefront.models.enums import ErrorType


class DataLoaderError(Exception):
    """
    Raised for a single imported row that cannot be loaded.
    The import loop catches it, records the message and moves on to the next row.
    """
    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.UNKNOWN,
        field_name: Optional[str] = None,
        offending_value: Optional[Any] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.field_name = field_name
        self.offending_value = str(offending_value)[:255] if offending_value is not None else None # Truncate
        self.original_exception = original_exception

    def __str__(self):
        return f"DataLoaderError ({self.error_type.value}): {self.message}" \
               f"{f' | Field: {self.field_name}' if self.field_name else ''}" \
               f"{f' | Value: {self.offending_value}' if self.offending_value is not None else ''}" \
               f"{f' | Original: {type(self.original_exception).__name__}: {str(self.original_exception)}' if self.original_exception else ''}"


class SpreadsheetParseError(Exception):
    """The uploaded file could not be decoded into rows at all."""
    def __init__(self, message: str, original_exception: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.original_exception = original_exception
