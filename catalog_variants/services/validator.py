from typing import List, Sequence

from catalog_variants.models.schemas import (
    AttributeGroup,
    ErrorDetailModel,
    ErrorType,
    LegacyAttribute,
)
from catalog_variants.variants.generator import group_legacy_values, resolve_child_scope


def _check_group(group_index: int, group: AttributeGroup) -> List[ErrorDetailModel]:
    errors: List[ErrorDetailModel] = []
    parent = group.parent_attribute
    parent_name = parent.name.strip()
    filled_values = [v.strip() for v in parent.values if v and v.strip()]

    if not parent_name and (filled_values or group.child_attributes):
        errors.append(ErrorDetailModel(
            group_index=group_index,
            field_name="parentAttribute.name",
            error_message="Attribute group has values but no name; it produces no variants.",
            error_type=ErrorType.VALIDATION,
        ))

    seen = set()
    for value in filled_values:
        if value in seen:
            errors.append(ErrorDetailModel(
                group_index=group_index,
                field_name="parentAttribute.values",
                error_message=f"Parent value '{value}' is listed more than once.",
                error_type=ErrorType.VALIDATION,
                offending_value=value,
            ))
        seen.add(value)

    for child_index, child in enumerate(group.child_attributes):
        if resolve_child_scope(group, child) is None:
            reference = child.parent_value_id if child.parent_value_id is not None else child.parent_value_index
            errors.append(ErrorDetailModel(
                group_index=group_index,
                field_name=f"childAttributes[{child_index}].parentValueIndex",
                error_message=f"Child attribute '{child.name}' refers to a parent value that no longer exists; it is ignored.",
                error_type=ErrorType.LOOKUP,
                offending_value=str(reference),
            ))
        elif not child.name.strip() and any(v and v.strip() for v in child.values):
            errors.append(ErrorDetailModel(
                group_index=group_index,
                field_name=f"childAttributes[{child_index}].name",
                error_message="Child attribute has values but no name; it produces no variants.",
                error_type=ErrorType.VALIDATION,
            ))

    return errors


def validate_attribute_groups(
    groups: Sequence[AttributeGroup],
    legacy: Sequence[LegacyAttribute],
) -> List[ErrorDetailModel]:
    """
    Reports problems in the authoring state without rejecting it. Everything
    reported here is tolerated by the generator; the list is shown to the
    merchant so they can fix it before saving.
    """
    errors: List[ErrorDetailModel] = []
    hierarchical_names = set()

    for group_index, group in enumerate(groups):
        errors.extend(_check_group(group_index, group))
        name = group.parent_attribute.name.strip()
        if name:
            hierarchical_names.add(name)
        for child in group.child_attributes:
            if child.name.strip():
                hierarchical_names.add(child.name.strip())

    # Both systems generate their own variants for the same dimension
    for name in group_legacy_values(legacy):
        if name in hierarchical_names:
            errors.append(ErrorDetailModel(
                field_name="attributes",
                error_message=(
                    f"Attribute '{name}' is defined both as an attribute group and as a legacy attribute; "
                    "both will produce separate variants."
                ),
                error_type=ErrorType.VALIDATION,
                offending_value=name,
            ))

    return errors
