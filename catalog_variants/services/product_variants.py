"""
Variant operations shared by the product creation form, the product edit
form and the storefront product page. All three go through this module so
they generate, key and match variants the same way.
"""
import logging
from typing import List, Optional, Sequence, Tuple, Union

from catalog_variants.core.config import settings
from catalog_variants.exceptions import VariantEngineError
from catalog_variants.models.enums import ErrorType
from catalog_variants.models.schemas import (
    AttributeGroup,
    GlobalAttribute,
    HierarchicalCombination,
    ImageDescriptor,
    LegacyAttribute,
    LegacyCombination,
    PersistedVariant,
    ProductVariantPayload,
    StorefrontProduct,
    VariantDescription,
    VariantPreviewResponse,
)
from catalog_variants.services.validator import validate_attribute_groups
from catalog_variants.utils.media import descriptors_from_urls, urls_from_descriptors
from catalog_variants.variants import attribute_editor
from catalog_variants.variants.bindings import VariantImageBindings
from catalog_variants.variants.generator import generate_variants
from catalog_variants.variants.key_codec import DEFAULT_VARIANT_KEY, encode_variant_key, valid_key_set
from catalog_variants.variants.resolver import find_matching_variant, resolve_variant_images

logger = logging.getLogger(__name__)

Combination = Union[HierarchicalCombination, LegacyCombination]


def build_variant_preview(
    groups: Sequence[AttributeGroup],
    legacy: Sequence[LegacyAttribute],
    bindings: VariantImageBindings,
) -> VariantPreviewResponse:
    """
    Regenerates the variant list after an attribute edit. Every variant gets a
    binding (empty when new); bindings of variants that disappeared are kept
    until save so reordering values does not lose images.
    """
    variants = generate_variants(groups, legacy)
    keys = [encode_variant_key(v) for v in variants]
    bindings.ensure_keys(keys)

    descriptions = [
        VariantDescription(
            key=key,
            attributes=variant.to_wire(),
            label=variant.label(),
            image_count=len(bindings.get(key)),
        )
        for key, variant in zip(keys, variants)
    ]
    return VariantPreviewResponse(
        variants=descriptions,
        bindings=bindings.as_dict(),
        warnings=validate_attribute_groups(groups, legacy),
    )


def apply_global_attribute(
    groups: Sequence[AttributeGroup],
    legacy: Sequence[LegacyAttribute],
    attribute: GlobalAttribute,
    target: str = "group",
    group_index: Optional[int] = None,
    child_index: Optional[int] = None,
) -> Tuple[List[AttributeGroup], List[LegacyAttribute]]:
    """
    Copies a catalog attribute into the authoring state.

    target="legacy" adds one legacy pair per value. Otherwise the attribute
    becomes a new group (no group_index), replaces a group's parent
    attribute, or fills one of its child attributes (child_index).
    """
    if target == "legacy":
        return list(groups), attribute_editor.import_global_legacy_attribute(legacy, attribute)

    if group_index is None:
        if child_index is not None:
            raise VariantEngineError(
                message="A child attribute import needs the index of its group.",
                error_type=ErrorType.VALIDATION,
                field_name="groupIndex",
            )
        updated = attribute_editor.add_attribute_group(groups, template=attribute)
    else:
        updated = attribute_editor.import_global_attribute(groups, group_index, attribute, child_index=child_index)
    logger.info(f"Imported global attribute '{attribute.name}' into attribute groups.")
    return updated, list(legacy)


def remove_attribute_value(
    groups: Sequence[AttributeGroup],
    group_index: int,
    value_index: int,
) -> List[AttributeGroup]:
    """Removes a parent value and the child attributes scoped to it."""
    return attribute_editor.remove_parent_value(groups, group_index, value_index)


def assign_media_selection(
    bindings: VariantImageBindings,
    variant: Optional[Combination],
    media: Sequence[ImageDescriptor],
    max_selection: Optional[int] = None,
) -> str:
    """
    Stores a media picker result as the images of `variant`, or as the default
    images when no variant is selected. The previous images are replaced.
    Returns the key the images were stored under.
    """
    limit = settings.MEDIA_MAX_SELECTION if max_selection is None else max_selection
    if len(media) > limit:
        raise VariantEngineError(
            message=f"Media selection has {len(media)} items; at most {limit} are allowed.",
            error_type=ErrorType.VALIDATION,
            field_name="media",
            offending_value=len(media),
        )

    key = DEFAULT_VARIANT_KEY if variant is None else encode_variant_key(variant)
    bindings.set(key, media)
    logger.info(f"Bound {len(media)} image(s) to {'default images' if key == DEFAULT_VARIANT_KEY else repr(key)}.")
    return key


def build_save_payload(
    groups: Sequence[AttributeGroup],
    legacy: Sequence[LegacyAttribute],
    bindings: VariantImageBindings,
    has_variant_images: bool,
    default_images: Optional[Sequence[ImageDescriptor]] = None,
) -> ProductVariantPayload:
    """
    Variant part of the product document. Bindings are pruned to the current
    variant set first so images of removed attribute values are not saved.
    With variant images disabled only the default images are written.
    """
    if default_images is None:
        default_images = bindings.default_images
    images = urls_from_descriptors(default_images)

    if not has_variant_images:
        return ProductVariantPayload(images=images, has_variant_images=False, variants=[])

    variants = generate_variants(groups, legacy)
    bindings.prune(valid_key_set(variants))

    persisted: List[PersistedVariant] = []
    seen_keys = set()
    for variant in variants:
        key = encode_variant_key(variant)
        # Repeated attribute values generate the same variant more than once
        if key in seen_keys:
            continue
        seen_keys.add(key)
        persisted.append(PersistedVariant(
            attributes=variant.to_wire(),
            images=urls_from_descriptors(bindings.get(key)),
        ))
    logger.info(f"Prepared {len(persisted)} variant(s) for save.")
    return ProductVariantPayload(images=images, has_variant_images=True, variants=persisted)


def load_bindings_from_product(product: StorefrontProduct) -> VariantImageBindings:
    """
    Rebuilds editable bindings from a saved product: the product images become
    the default images and each saved variant's image URLs are bound to its key.
    """
    bindings = VariantImageBindings()
    bindings.set_default_images(descriptors_from_urls(product.images))

    if not product.has_variant_images:
        return bindings

    for persisted in product.variants:
        if not persisted.images:
            continue
        key = encode_variant_key(persisted.combination())
        if key == DEFAULT_VARIANT_KEY:
            continue
        bindings.set(key, descriptors_from_urls(persisted.images))
    return bindings


def resolve_product_images(
    product: StorefrontProduct,
    selection: dict,
) -> Tuple[List[ImageDescriptor], Optional[Combination]]:
    """
    Images the product page shows for the shopper's current selection, with
    the variant that supplied them (None when the default images are shown).
    """
    bindings = load_bindings_from_product(product)
    if not product.has_variant_images or not product.variants:
        return bindings.default_images, None

    variants = [persisted.combination() for persisted in product.variants]
    images = resolve_variant_images(selection, variants, bindings)

    match = find_matching_variant(selection, variants)
    if match is None or not bindings.get(encode_variant_key(match)):
        return images, None
    return images, match
