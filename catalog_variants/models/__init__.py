# catalog_variants/models/__init__.py

from .enums import CombinationKind, ErrorType
from .schemas import (
    AttributeGroup,
    AttributeSelection,
    ChildAttribute,
    ErrorDetailModel,
    GlobalAttribute,
    HierarchicalCombination,
    ImageDescriptor,
    LegacyAttribute,
    LegacyCombination,
    ParentAttribute,
    PersistedVariant,
    ProductVariantPayload,
    StorefrontProduct,
    VariantCombination,
)


__all__ = [
    "CombinationKind",
    "ErrorType",
    "AttributeGroup",
    "AttributeSelection",
    "ChildAttribute",
    "ErrorDetailModel",
    "GlobalAttribute",
    "HierarchicalCombination",
    "ImageDescriptor",
    "LegacyAttribute",
    "LegacyCombination",
    "ParentAttribute",
    "PersistedVariant",
    "ProductVariantPayload",
    "StorefrontProduct",
    "VariantCombination",
]
