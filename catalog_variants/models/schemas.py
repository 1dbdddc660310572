import uuid
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator, model_validator

from .enums import CombinationKind, ErrorType


def new_value_id() -> str:
    return uuid.uuid4().hex


def _split_comma_values(v):
    # The editors send child values as one comma separated text field
    if isinstance(v, str):
        return [part.strip() for part in v.split(",")]
    if v is None:
        return []
    return v


CommaSeparatedValues = Annotated[List[str], BeforeValidator(_split_comma_values)]


# --- Media ---

class ImageDescriptor(BaseModel):
    """Image record returned by the media picker. Treated as an opaque value."""
    model_config = ConfigDict(frozen=True)

    url: str
    name: str = ""
    type: str = "image"


# --- Attribute definitions ---

class ParentAttribute(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    values: List[str] = Field(default_factory=lambda: [""])
    value_ids: List[str] = Field(default_factory=list, alias="valueIds")

    @field_validator("values", mode="before")
    @classmethod
    def none_to_empty_list(cls, v):
        return [] if v is None else v

    @model_validator(mode="after")
    def align_value_ids(self) -> "ParentAttribute":
        # Documents saved before value ids existed carry none; one id per value
        missing = len(self.values) - len(self.value_ids)
        if missing > 0:
            self.value_ids = self.value_ids + [new_value_id() for _ in range(missing)]
        elif missing < 0:
            self.value_ids = self.value_ids[:len(self.values)]
        return self


class ChildAttribute(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    values: CommaSeparatedValues = Field(default_factory=list)
    parent_value_index: int = Field(..., alias="parentValueIndex")
    parent_value_id: Optional[str] = Field(None, alias="parentValueId")


class AttributeGroup(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    parent_attribute: ParentAttribute = Field(default_factory=ParentAttribute, alias="parentAttribute")
    child_attributes: List[ChildAttribute] = Field(default_factory=list, alias="childAttributes")


class LegacyAttribute(BaseModel):
    name: str = ""
    value: str = ""


class GlobalAttribute(BaseModel):
    """Catalog-wide attribute template the merchant may import into a group."""
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(None, alias="_id")
    name: str
    values: CommaSeparatedValues = Field(default_factory=list)
    description: Optional[str] = None


# --- Variant combinations ---

class AttributeSelection(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    parent_name: str = Field(..., alias="parentName")
    parent_value: str = Field(..., alias="parentValue")
    child_name: Optional[str] = Field(None, alias="childName")
    child_value: Optional[str] = Field(None, alias="childValue")

    @property
    def has_child(self) -> bool:
        return bool(self.child_name) and bool(self.child_value)


class HierarchicalCombination(BaseModel):
    kind: Literal["hierarchical"] = CombinationKind.HIERARCHICAL.value
    selections: List[AttributeSelection] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.selections

    def attribute_map(self) -> Dict[str, str]:
        attributes: Dict[str, str] = {}
        for selection in self.selections:
            attributes[selection.parent_name] = selection.parent_value
            if selection.has_child:
                attributes[selection.child_name] = selection.child_value
        return attributes

    def to_wire(self) -> List[Dict[str, Any]]:
        return [s.model_dump(by_alias=True) for s in self.selections]

    def label(self) -> str:
        return " / ".join(f"{name}: {value}" for name, value in self.attribute_map().items())


class LegacyCombination(BaseModel):
    kind: Literal["legacy"] = CombinationKind.LEGACY.value
    pairs: Dict[str, str] = Field(default_factory=dict)

    def is_empty(self) -> bool:
        return not self.pairs

    def attribute_map(self) -> Dict[str, str]:
        return dict(self.pairs)

    def to_wire(self) -> Dict[str, str]:
        return dict(self.pairs)

    def label(self) -> str:
        return " / ".join(f"{name}: {value}" for name, value in self.pairs.items())


VariantCombination = Annotated[
    Union[HierarchicalCombination, LegacyCombination],
    Field(discriminator="kind"),
]

# Persisted shape of `variants[].attributes`: a list for hierarchical, an object for legacy
WireAttributes = Union[List[AttributeSelection], Dict[str, str]]


# --- Persistence ---

class PersistedVariant(BaseModel):
    attributes: WireAttributes
    images: List[str] = Field(default_factory=list)

    def combination(self) -> Union[HierarchicalCombination, LegacyCombination]:
        if isinstance(self.attributes, list):
            return HierarchicalCombination(selections=list(self.attributes))
        return LegacyCombination(pairs=dict(self.attributes))


class ProductVariantPayload(BaseModel):
    """Variant portion of the product document written on save."""
    model_config = ConfigDict(populate_by_name=True)

    images: List[str] = Field(default_factory=list)
    has_variant_images: bool = Field(False, alias="hasVariantImages")
    variants: List[PersistedVariant] = Field(default_factory=list)


class StorefrontProduct(BaseModel):
    """The subset of a persisted product the storefront needs to pick images."""
    model_config = ConfigDict(populate_by_name=True)

    images: List[str] = Field(default_factory=list)
    has_variant_images: bool = Field(False, alias="hasVariantImages")
    variants: List[PersistedVariant] = Field(default_factory=list)
    attribute_groups: List[AttributeGroup] = Field(default_factory=list, alias="attributeGroups")
    attributes: List[LegacyAttribute] = Field(default_factory=list)


# --- Validation reporting ---

class ErrorDetailModel(BaseModel):
    group_index: Optional[int] = None
    field_name: Optional[str] = None
    error_message: str
    error_type: ErrorType = ErrorType.UNKNOWN
    offending_value: Optional[str] = None

    model_config = ConfigDict(use_enum_values=True)


# --- API Request / Response Schemas ---

BindingMap = Dict[str, List[ImageDescriptor]]


class VariantPreviewRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    attribute_groups: List[AttributeGroup] = Field(default_factory=list, alias="attributeGroups")
    attributes: List[LegacyAttribute] = Field(default_factory=list)
    bindings: BindingMap = Field(default_factory=dict)


class VariantDescription(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    key: str
    attributes: WireAttributes
    label: str
    image_count: int = Field(0, alias="imageCount")


class VariantPreviewResponse(BaseModel):
    variants: List[VariantDescription] = Field(default_factory=list)
    bindings: BindingMap = Field(default_factory=dict)
    warnings: List[ErrorDetailModel] = Field(default_factory=list)


class MediaSelectionRequest(BaseModel):
    bindings: BindingMap = Field(default_factory=dict)
    variant: Optional[WireAttributes] = None  # None targets the default images
    media: List[ImageDescriptor] = Field(default_factory=list)


class MediaSelectionResponse(BaseModel):
    key: str
    bindings: BindingMap


class SavePayloadRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    attribute_groups: List[AttributeGroup] = Field(default_factory=list, alias="attributeGroups")
    attributes: List[LegacyAttribute] = Field(default_factory=list)
    images: List[ImageDescriptor] = Field(default_factory=list)
    has_variant_images: bool = Field(False, alias="hasVariantImages")
    bindings: BindingMap = Field(default_factory=dict)


class EditableBindingsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    default_images: List[ImageDescriptor] = Field(default_factory=list, alias="defaultImages")
    bindings: BindingMap = Field(default_factory=dict)


class GlobalAttributeImportRequest(BaseModel):
    """
    Imports a catalog attribute into the authoring state. Without `groupIndex`
    a new group is created from it; with `childIndex` it fills that child
    attribute. `target="legacy"` adds it to the legacy list instead.
    """
    model_config = ConfigDict(populate_by_name=True)

    attribute_groups: List[AttributeGroup] = Field(default_factory=list, alias="attributeGroups")
    attributes: List[LegacyAttribute] = Field(default_factory=list)
    attribute: GlobalAttribute
    target: Literal["group", "legacy"] = "group"
    group_index: Optional[int] = Field(None, alias="groupIndex")
    child_index: Optional[int] = Field(None, alias="childIndex")


class RemoveParentValueRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    attribute_groups: List[AttributeGroup] = Field(default_factory=list, alias="attributeGroups")
    attributes: List[LegacyAttribute] = Field(default_factory=list)
    group_index: int = Field(..., alias="groupIndex")
    value_index: int = Field(..., alias="valueIndex")


class AttributeDefinitionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    attribute_groups: List[AttributeGroup] = Field(default_factory=list, alias="attributeGroups")
    attributes: List[LegacyAttribute] = Field(default_factory=list)
    warnings: List[ErrorDetailModel] = Field(default_factory=list)


class StorefrontImagesRequest(BaseModel):
    product: StorefrontProduct
    selection: Optional[Dict[str, str]] = None


class StorefrontImagesResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    selection: Dict[str, str] = Field(default_factory=dict)
    images: List[str] = Field(default_factory=list)
    variant_key: Optional[str] = Field(None, alias="variantKey")
    matched: bool = False
