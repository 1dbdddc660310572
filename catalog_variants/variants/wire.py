from typing import Any, Union

from catalog_variants.exceptions import VariantEngineError
from catalog_variants.models.enums import ErrorType
from catalog_variants.models.schemas import (
    AttributeSelection,
    HierarchicalCombination,
    LegacyCombination,
)


def combination_from_wire(attributes: Any) -> Union[HierarchicalCombination, LegacyCombination]:
    """
    Converts the persisted `attributes` value of a variant back into a combination.

    Example inputs:
        [{'parentName': 'Size', 'parentValue': '2mm', 'childName': 'Color', 'childValue': 'Red'}]
            -> HierarchicalCombination
        {'Color': 'Red', 'Size': 'S'}
            -> LegacyCombination
    """
    if isinstance(attributes, (HierarchicalCombination, LegacyCombination)):
        return attributes
    if isinstance(attributes, list):
        return HierarchicalCombination(
            selections=[AttributeSelection.model_validate(a) for a in attributes]
        )
    if isinstance(attributes, dict):
        return LegacyCombination(pairs={str(k): str(v) for k, v in attributes.items()})
    raise VariantEngineError(
        message=f"Unsupported variant attributes shape: {type(attributes).__name__}",
        error_type=ErrorType.VALIDATION,
        field_name="attributes",
        offending_value=attributes,
    )
