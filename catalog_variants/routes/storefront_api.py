import logging

from fastapi import APIRouter

from catalog_variants.models.schemas import StorefrontImagesRequest, StorefrontImagesResponse
from catalog_variants.services.product_variants import resolve_product_images
from catalog_variants.utils.media import urls_from_descriptors
from catalog_variants.variants.key_codec import encode_variant_key
from catalog_variants.variants.resolver import initial_selection

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/storefront/products",
    tags=["Storefront"],
)


@router.post("/images", response_model=StorefrontImagesResponse,
             summary="Images to display for the shopper's attribute selection")
async def resolve_display_images(request: StorefrontImagesRequest):
    product = request.product
    selection = request.selection
    if selection is None:
        selection = initial_selection(product.attribute_groups)

    images, variant = resolve_product_images(product, selection)
    logger.debug(f"Resolved {len(images)} image(s) for selection {selection}.")
    return StorefrontImagesResponse(
        selection=selection,
        images=urls_from_descriptors(images),
        variant_key=encode_variant_key(variant) if variant is not None else None,
        matched=variant is not None,
    )
