import logging
from typing import Dict, Iterable, List, Mapping, Optional

from catalog_variants.exceptions import VariantEngineError
from catalog_variants.models.enums import ErrorType
from catalog_variants.models.schemas import ImageDescriptor
from catalog_variants.variants.key_codec import DEFAULT_VARIANT_KEY

logger = logging.getLogger(__name__)


class VariantImageBindings:
    """
    Ordered image lists keyed by variant key, plus the default bucket stored
    under DEFAULT_VARIANT_KEY for the "no variant selected" state.

    Bindings outlive variant regeneration; nothing is dropped until prune()
    is called, which callers do right before persisting.
    """

    def __init__(self, bindings: Optional[Mapping[str, Iterable[ImageDescriptor]]] = None):
        self._bindings: Dict[str, List[ImageDescriptor]] = {}
        for key, images in (bindings or {}).items():
            self.set(key, images)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Iterable]) -> "VariantImageBindings":
        """Builds a store from plain dicts (request bodies, saved editor state)."""
        return cls({
            key: [ImageDescriptor.model_validate(image) for image in images]
            for key, images in raw.items()
        })

    def __contains__(self, key: str) -> bool:
        return key in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)

    def keys(self) -> List[str]:
        return list(self._bindings.keys())

    def get(self, key: str) -> List[ImageDescriptor]:
        return list(self._bindings.get(key, []))

    def set(self, key: str, images: Iterable[ImageDescriptor]) -> None:
        if not isinstance(key, str):
            raise VariantEngineError(
                message="Variant key must be a string.",
                error_type=ErrorType.VALIDATION,
                field_name="key",
                offending_value=key,
            )
        self._bindings[key] = list(images)

    def remove(self, key: str, index: Optional[int] = None) -> None:
        """
        Removes the whole binding for `key`, or only the image at `index` when given.
        Removing a binding that does not exist is a no-op.
        """
        if index is None:
            self._bindings.pop(key, None)
            return

        images = self._bindings.get(key, [])
        if not 0 <= index < len(images):
            raise VariantEngineError(
                message=f"No image at position {index} for variant '{key}' ({len(images)} bound).",
                error_type=ErrorType.LOOKUP,
                field_name="index",
                offending_value=index,
            )
        self._bindings[key] = images[:index] + images[index + 1:]

    def ensure_keys(self, keys: Iterable[str]) -> None:
        """Creates an empty binding for every key that has none yet."""
        for key in keys:
            self._bindings.setdefault(key, [])

    @property
    def default_images(self) -> List[ImageDescriptor]:
        return self.get(DEFAULT_VARIANT_KEY)

    def set_default_images(self, images: Iterable[ImageDescriptor]) -> None:
        self.set(DEFAULT_VARIANT_KEY, images)

    def prune(self, valid_keys: Iterable[str]) -> List[str]:
        """
        Drops every binding whose key is not in `valid_keys`; the default bucket
        is always kept. Returns the dropped keys.
        """
        keep = set(valid_keys)
        keep.add(DEFAULT_VARIANT_KEY)
        removed = [key for key in self._bindings if key not in keep]
        for key in removed:
            del self._bindings[key]
        if removed:
            logger.info(f"Pruned {len(removed)} orphaned variant image binding(s): {removed}")
        return removed

    def as_dict(self) -> Dict[str, List[ImageDescriptor]]:
        return {key: list(images) for key, images in self._bindings.items()}
