from typing import Iterable, List, Set, Union

from catalog_variants.exceptions import VariantEngineError
from catalog_variants.models.enums import CombinationKind, ErrorType
from catalog_variants.models.schemas import (
    AttributeSelection,
    HierarchicalCombination,
    LegacyCombination,
)

# Reserved key of the "no variant selected" image bucket.
DEFAULT_VARIANT_KEY = ""

PAIR_SEPARATOR = "|"
SELECTION_SEPARATOR = "||"
NAME_VALUE_SEPARATOR = ":"

_ESCAPES = str.maketrans({"\\": "\\\\", "|": "\\|", ":": "\\:"})


def _escape(text: str) -> str:
    # Separators inside names/values must not read as structure
    return text.translate(_ESCAPES)


def _pair(name: str, value: str) -> str:
    return f"{_escape(name)}{NAME_VALUE_SEPARATOR}{_escape(value)}"


def _selection_sort_key(selection: AttributeSelection):
    # Values break ties between selections sharing both names
    if selection.has_child:
        child_name, child_value = selection.child_name, selection.child_value
    else:
        child_name, child_value = "", ""
    return (selection.parent_name, child_name, selection.parent_value, child_value)


def _render_selection(selection: AttributeSelection) -> str:
    rendered = _pair(selection.parent_name, selection.parent_value)
    if selection.has_child:
        rendered += PAIR_SEPARATOR + _pair(selection.child_name, selection.child_value)
    return rendered


def encode_legacy_key(combination: LegacyCombination) -> str:
    """'Size:S|Color:Red' style body, entries sorted by attribute name."""
    return PAIR_SEPARATOR.join(
        _pair(name, value) for name, value in sorted(combination.pairs.items())
    )


def encode_hierarchical_key(combination: HierarchicalCombination) -> str:
    """
    Selections sorted by parent name, then child name (no child sorts first),
    each rendered 'Parent:value' or 'Parent:value|Child:value', joined with '||'.
    """
    ordered = sorted(combination.selections, key=_selection_sort_key)
    return SELECTION_SEPARATOR.join(_render_selection(s) for s in ordered)


def encode_variant_key(combination: Union[HierarchicalCombination, LegacyCombination]) -> str:
    """
    Canonical identity of a variant combination.

    The key does not depend on the order attributes were declared in. Every
    non-empty key is prefixed with its combination kind, so the legacy and
    hierarchical systems can never produce the same key. An empty combination
    encodes to DEFAULT_VARIANT_KEY.
    """
    if isinstance(combination, LegacyCombination):
        body = encode_legacy_key(combination)
        kind = CombinationKind.LEGACY
    elif isinstance(combination, HierarchicalCombination):
        body = encode_hierarchical_key(combination)
        kind = CombinationKind.HIERARCHICAL
    else:
        raise VariantEngineError(
            message=f"Cannot derive a variant key from {type(combination).__name__}.",
            error_type=ErrorType.VALIDATION,
            field_name="attributes",
            offending_value=combination,
        )

    if not body:
        return DEFAULT_VARIANT_KEY
    # Unprefixed, parent Color:Red with child Size:2mm and legacy {Color: Red, Size: 2mm} are both 'Color:Red|Size:2mm'
    return f"{kind.value}{NAME_VALUE_SEPARATOR}{body}"


def variant_keys(variants: Iterable[Union[HierarchicalCombination, LegacyCombination]]) -> List[str]:
    """Keys of the given variants, in variant order."""
    return [encode_variant_key(v) for v in variants]


def valid_key_set(variants: Iterable[Union[HierarchicalCombination, LegacyCombination]]) -> Set[str]:
    return {key for key in variant_keys(variants) if key != DEFAULT_VARIANT_KEY}
