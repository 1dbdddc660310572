from enum import Enum


class CombinationKind(str, Enum):
    """
    Identifies which attribute system a variant combination came from.
    """
    HIERARCHICAL = "hierarchical"   # Parent attribute value, optionally with one child attribute value.
    LEGACY = "legacy"               # Flat name -> value pairs, Cartesian-multiplied across names.


class ErrorType(str, Enum):
    VALIDATION = "VALIDATION"
    LOOKUP = "LOOKUP"
    CONFIGURATION = "CONFIGURATION"
    UNKNOWN = "UNKNOWN"
