import logging
from typing import Dict, List, Mapping, Optional, Sequence, Union

from catalog_variants.models.schemas import (
    AttributeGroup,
    HierarchicalCombination,
    ImageDescriptor,
    LegacyCombination,
)
from catalog_variants.variants.bindings import VariantImageBindings
from catalog_variants.variants.key_codec import encode_variant_key

logger = logging.getLogger(__name__)

Combination = Union[HierarchicalCombination, LegacyCombination]


def variant_matches(selection: Mapping[str, str], combination: Combination) -> bool:
    """
    True when every attribute the variant shares with the selection has the
    selected value. Attributes the shopper has not picked yet are ignored, but
    at least one attribute must be shared.
    """
    attributes = combination.attribute_map()
    shared = [name for name in attributes if name in selection]
    if not shared:
        return False
    return all(attributes[name] == selection[name] for name in shared)


def find_matching_variant(
    selection: Mapping[str, str],
    variants: Sequence[Combination],
) -> Optional[Combination]:
    """First variant, in generation order, that matches the selection."""
    if not selection:
        return None
    for combination in variants:
        if variant_matches(selection, combination):
            return combination
    return None


def resolve_variant_images(
    selection: Mapping[str, str],
    variants: Sequence[Combination],
    bindings: VariantImageBindings,
) -> List[ImageDescriptor]:
    """
    Images to show for the shopper's (possibly partial) selection.

    The first matching variant wins. When nothing matches, or the winner has no
    images bound, the default images are returned.

    Example: variants [{Size:2mm,Color:Red}, {Size:2mm,Color:Blue}] with selection
    {Size: 2mm} resolves to the images of {Size:2mm,Color:Red}.
    """
    match = find_matching_variant(selection, variants)
    if match is None:
        return bindings.default_images

    images = bindings.get(encode_variant_key(match))
    if not images:
        logger.debug(f"Variant '{match.label()}' matched but has no images; using default images.")
        return bindings.default_images
    return images


def initial_selection(groups: Sequence[AttributeGroup]) -> Dict[str, str]:
    """
    Selection the product page starts with: the first non-blank value of every
    named parent attribute.
    """
    selection: Dict[str, str] = {}
    for group in groups:
        name = group.parent_attribute.name.strip()
        if not name or name in selection:
            continue
        for value in group.parent_attribute.values:
            if value and value.strip():
                selection[name] = value.strip()
                break
    return selection


def selectable_options(variants: Sequence[Combination]) -> Dict[str, List[str]]:
    """Attribute name -> distinct values, in the order the variants introduce them."""
    options: Dict[str, List[str]] = {}
    for combination in variants:
        for name, value in combination.attribute_map().items():
            values = options.setdefault(name, [])
            if value not in values:
                values.append(value)
    return options
