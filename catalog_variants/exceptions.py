from typing import Optional, Any
from catalog_variants.models.enums import ErrorType


class VariantEngineError(Exception):
    """
    Raised when a caller hands the variant engine something it cannot act on
    (a position that does not exist, an over-limit media selection, an attribute
    shape that is neither a selection list nor a name/value mapping).

    Transiently invalid authoring data is never reported through this exception;
    the generator filters it and the validator reports it as warnings.
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
        return f"VariantEngineError ({self.error_type.value}): {self.message}" \
               f"{f' | Field: {self.field_name}' if self.field_name else ''}" \
               f"{f' | Value: {self.offending_value}' if self.offending_value is not None else ''}" \
               f"{f' | Original: {type(self.original_exception).__name__}: {str(self.original_exception)}' if self.original_exception else ''}"
