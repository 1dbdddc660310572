import logging

from fastapi import APIRouter, HTTPException

from catalog_variants.core.config import settings
from catalog_variants.exceptions import VariantEngineError
from catalog_variants.models.schemas import (
    AttributeDefinitionResponse,
    EditableBindingsResponse,
    GlobalAttributeImportRequest,
    MediaSelectionRequest,
    MediaSelectionResponse,
    ProductVariantPayload,
    RemoveParentValueRequest,
    SavePayloadRequest,
    StorefrontProduct,
    VariantPreviewRequest,
    VariantPreviewResponse,
)
from catalog_variants.services.product_variants import (
    apply_global_attribute,
    assign_media_selection,
    build_save_payload,
    build_variant_preview,
    load_bindings_from_product,
    remove_attribute_value,
)
from catalog_variants.services.validator import validate_attribute_groups
from catalog_variants.variants.bindings import VariantImageBindings
from catalog_variants.variants.key_codec import DEFAULT_VARIANT_KEY
from catalog_variants.variants.wire import combination_from_wire

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/products/variants",
    tags=["Product Variants"],
)


@router.post("/preview", response_model=VariantPreviewResponse,
             summary="Regenerate the variant list for the attributes being edited")
async def preview_variants(request: VariantPreviewRequest):
    bindings = VariantImageBindings(request.bindings)
    return build_variant_preview(request.attribute_groups, request.attributes, bindings)


@router.post("/media", response_model=MediaSelectionResponse,
             summary="Attach a media picker selection to a variant or to the default images",
             responses={422: {"description": "Invalid variant or too many images"}})
async def select_variant_media(request: MediaSelectionRequest):
    bindings = VariantImageBindings(request.bindings)
    try:
        variant = None if request.variant is None else combination_from_wire(request.variant)
        key = assign_media_selection(bindings, variant, request.media, settings.MEDIA_MAX_SELECTION)
    except VariantEngineError as e:
        logger.warning(f"Rejected media selection: {e}")
        raise HTTPException(status_code=422, detail=e.message)
    return MediaSelectionResponse(key=key, bindings=bindings.as_dict())


@router.post("/payload", response_model=ProductVariantPayload,
             summary="Build the variant part of the product document for saving")
async def build_variant_payload(request: SavePayloadRequest):
    bindings = VariantImageBindings(request.bindings)
    default_images = request.images or bindings.get(DEFAULT_VARIANT_KEY)
    return build_save_payload(
        request.attribute_groups,
        request.attributes,
        bindings,
        request.has_variant_images,
        default_images=default_images,
    )


@router.post("/bindings", response_model=EditableBindingsResponse,
             summary="Turn a saved product back into editable image bindings")
async def load_variant_bindings(product: StorefrontProduct):
    bindings = load_bindings_from_product(product)
    return EditableBindingsResponse(
        default_images=bindings.default_images,
        bindings=bindings.as_dict(),
    )


@router.post("/attributes/import", response_model=AttributeDefinitionResponse,
             summary="Import a global attribute into the attribute groups or the legacy attributes",
             responses={422: {"description": "Group or child attribute position does not exist"}})
async def import_global_attribute(request: GlobalAttributeImportRequest):
    try:
        groups, legacy = apply_global_attribute(
            request.attribute_groups,
            request.attributes,
            request.attribute,
            target=request.target,
            group_index=request.group_index,
            child_index=request.child_index,
        )
    except VariantEngineError as e:
        logger.warning(f"Rejected global attribute import: {e}")
        raise HTTPException(status_code=422, detail=e.message)
    return AttributeDefinitionResponse(
        attribute_groups=groups,
        attributes=legacy,
        warnings=validate_attribute_groups(groups, legacy),
    )


@router.post("/attributes/remove-value", response_model=AttributeDefinitionResponse,
             summary="Remove a parent value together with the child attributes scoped to it",
             responses={422: {"description": "Group or value position does not exist"}})
async def remove_parent_value(request: RemoveParentValueRequest):
    try:
        groups = remove_attribute_value(request.attribute_groups, request.group_index, request.value_index)
    except VariantEngineError as e:
        logger.warning(f"Rejected parent value removal: {e}")
        raise HTTPException(status_code=422, detail=e.message)
    return AttributeDefinitionResponse(
        attribute_groups=groups,
        attributes=request.attributes,
        warnings=validate_attribute_groups(groups, request.attributes),
    )
