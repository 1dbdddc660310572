# catalog_variants/variants/__init__.py
# Shared variant engine used by product creation, product editing and the storefront.

from .generator import generate_variants
from .key_codec import DEFAULT_VARIANT_KEY, encode_variant_key
from .bindings import VariantImageBindings
from .resolver import resolve_variant_images
from .attribute_editor import (
    add_attribute_group,
    add_child_attribute,
    add_legacy_attribute,
    add_parent_value,
    import_global_attribute,
    import_global_legacy_attribute,
    remove_attribute_group,
    remove_child_attribute,
    remove_legacy_attribute,
    remove_parent_value,
    set_child_name,
    set_child_parent_value,
    set_child_values,
    set_legacy_attribute,
    set_parent_name,
    set_parent_value,
)


__all__ = [
    "generate_variants",
    "DEFAULT_VARIANT_KEY",
    "encode_variant_key",
    "VariantImageBindings",
    "resolve_variant_images",
    "add_attribute_group",
    "add_child_attribute",
    "add_legacy_attribute",
    "add_parent_value",
    "import_global_attribute",
    "import_global_legacy_attribute",
    "remove_attribute_group",
    "remove_child_attribute",
    "remove_legacy_attribute",
    "remove_parent_value",
    "set_child_name",
    "set_child_parent_value",
    "set_child_values",
    "set_legacy_attribute",
    "set_parent_name",
    "set_parent_value",
]
