from typing import Iterable, List, Optional

from catalog_variants.core.config import settings
from catalog_variants.models.schemas import ImageDescriptor


def descriptor_from_url(url: str, media_type: Optional[str] = None) -> ImageDescriptor:
    """Rebuilds a media descriptor from a stored URL; the name is its last path segment."""
    name = url.rstrip("/").split("/")[-1]
    return ImageDescriptor(url=url, name=name, type=media_type or settings.DEFAULT_MEDIA_TYPE)


def descriptors_from_urls(urls: Iterable[str]) -> List[ImageDescriptor]:
    return [descriptor_from_url(url) for url in urls if url]


def urls_from_descriptors(images: Iterable[ImageDescriptor]) -> List[str]:
    return [image.url for image in images]
