from enum import Enum


class ErrorType(str, Enum):
    """
    Category of a row-level failure raised while loading imported records.
    """
    VALIDATION = "VALIDATION"
    DATABASE = "DATABASE"
    LOOKUP = "LOOKUP"
    FILE_FORMAT = "FILE_FORMAT"
    UNEXPECTED_ROW_ERROR = "UNEXPECTED_ROW_ERROR"
    UNKNOWN = "UNKNOWN"
