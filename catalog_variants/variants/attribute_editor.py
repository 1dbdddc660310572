"""
Editing operations on a product's attribute definition.

Every function takes the current groups (or legacy attributes) and returns an
updated copy; the input is never mutated. Positions that do not exist raise
VariantEngineError, while blank names and values are accepted as in-progress
edits and simply produce no variants.
"""
import logging
from typing import List, Optional, Sequence, Union

from catalog_variants.exceptions import VariantEngineError
from catalog_variants.models.enums import ErrorType
from catalog_variants.models.schemas import (
    AttributeGroup,
    ChildAttribute,
    GlobalAttribute,
    LegacyAttribute,
    ParentAttribute,
    new_value_id,
)
from catalog_variants.variants.generator import resolve_child_scope

logger = logging.getLogger(__name__)


def _copy_groups(groups: Sequence[AttributeGroup]) -> List[AttributeGroup]:
    return [group.model_copy(deep=True) for group in groups]


def _check_position(position: int, size: int, field_name: str, what: str) -> None:
    if not 0 <= position < size:
        raise VariantEngineError(
            message=f"{what} position {position} does not exist ({size} defined).",
            error_type=ErrorType.LOOKUP,
            field_name=field_name,
            offending_value=position,
        )


def _group_at(groups: List[AttributeGroup], group_index: int) -> AttributeGroup:
    _check_position(group_index, len(groups), "group_index", "Attribute group")
    return groups[group_index]


def _child_at(group: AttributeGroup, child_index: int) -> ChildAttribute:
    _check_position(child_index, len(group.child_attributes), "child_index", "Child attribute")
    return group.child_attributes[child_index]


def _split_values(values: Union[str, Sequence[str]]) -> List[str]:
    if isinstance(values, str):
        return [v.strip() for v in values.split(",")]
    return [v.strip() for v in values]


# --- Groups ---

def add_attribute_group(
    groups: Sequence[AttributeGroup],
    template: Optional[GlobalAttribute] = None,
) -> List[AttributeGroup]:
    """Appends an empty group, or one pre-filled from a global attribute template."""
    updated = _copy_groups(groups)
    if template is None:
        updated.append(AttributeGroup())
    else:
        updated.append(AttributeGroup(parent_attribute=ParentAttribute(
            name=template.name,
            values=list(template.values),
        )))
    return updated


def remove_attribute_group(groups: Sequence[AttributeGroup], group_index: int) -> List[AttributeGroup]:
    updated = _copy_groups(groups)
    _group_at(updated, group_index)
    del updated[group_index]
    return updated


# --- Parent attribute ---

def set_parent_name(groups: Sequence[AttributeGroup], group_index: int, name: str) -> List[AttributeGroup]:
    updated = _copy_groups(groups)
    _group_at(updated, group_index).parent_attribute.name = name
    return updated


def add_parent_value(groups: Sequence[AttributeGroup], group_index: int, value: str = "") -> List[AttributeGroup]:
    updated = _copy_groups(groups)
    parent = _group_at(updated, group_index).parent_attribute
    parent.values.append(value)
    parent.value_ids.append(new_value_id())
    return updated


def set_parent_value(
    groups: Sequence[AttributeGroup],
    group_index: int,
    value_index: int,
    value: str,
) -> List[AttributeGroup]:
    """Changes a parent value in place. Writing one past the end appends."""
    updated = _copy_groups(groups)
    parent = _group_at(updated, group_index).parent_attribute
    if value_index == len(parent.values):
        parent.values.append(value)
        parent.value_ids.append(new_value_id())
        return updated
    _check_position(value_index, len(parent.values), "value_index", "Parent value")
    parent.values[value_index] = value
    return updated


def remove_parent_value(groups: Sequence[AttributeGroup], group_index: int, value_index: int) -> List[AttributeGroup]:
    """
    Removes a parent value together with every child attribute scoped to it.
    Children of later values keep pointing at the same value: their
    positional index shifts down by one.
    """
    updated = _copy_groups(groups)
    group = _group_at(updated, group_index)
    parent = group.parent_attribute
    _check_position(value_index, len(parent.values), "value_index", "Parent value")

    scopes = [resolve_child_scope(group, child) for child in group.child_attributes]

    del parent.values[value_index]
    del parent.value_ids[value_index]

    kept: List[ChildAttribute] = []
    for child, scope in zip(group.child_attributes, scopes):
        if scope == value_index:
            continue
        if scope is not None:
            child.parent_value_index = scope - 1 if scope > value_index else scope
        elif child.parent_value_index > value_index:
            # Unresolved index-scoped child; shifted like the rest so it stays consistent
            child.parent_value_index -= 1
        kept.append(child)

    dropped = len(group.child_attributes) - len(kept)
    if dropped:
        logger.debug(f"Removed {dropped} child attribute(s) scoped to parent value {value_index} of group {group_index}.")
    group.child_attributes = kept
    return updated


# --- Child attributes ---

def add_child_attribute(groups: Sequence[AttributeGroup], group_index: int, parent_value_index: int) -> List[AttributeGroup]:
    updated = _copy_groups(groups)
    group = _group_at(updated, group_index)
    parent = group.parent_attribute
    _check_position(parent_value_index, len(parent.values), "parent_value_index", "Parent value")
    group.child_attributes.append(ChildAttribute(
        name="",
        values=[],
        parent_value_index=parent_value_index,
        parent_value_id=parent.value_ids[parent_value_index],
    ))
    return updated


def set_child_name(groups: Sequence[AttributeGroup], group_index: int, child_index: int, name: str) -> List[AttributeGroup]:
    updated = _copy_groups(groups)
    _child_at(_group_at(updated, group_index), child_index).name = name
    return updated


def set_child_values(
    groups: Sequence[AttributeGroup],
    group_index: int,
    child_index: int,
    values: Union[str, Sequence[str]],
) -> List[AttributeGroup]:
    """`values` may be the raw comma separated text of the editor field."""
    updated = _copy_groups(groups)
    _child_at(_group_at(updated, group_index), child_index).values = _split_values(values)
    return updated


def set_child_parent_value(
    groups: Sequence[AttributeGroup],
    group_index: int,
    child_index: int,
    parent_value_index: int,
) -> List[AttributeGroup]:
    """Moves a child attribute under another value of the same parent."""
    updated = _copy_groups(groups)
    group = _group_at(updated, group_index)
    child = _child_at(group, child_index)
    parent = group.parent_attribute
    _check_position(parent_value_index, len(parent.values), "parent_value_index", "Parent value")
    child.parent_value_index = parent_value_index
    child.parent_value_id = parent.value_ids[parent_value_index]
    return updated


def remove_child_attribute(groups: Sequence[AttributeGroup], group_index: int, child_index: int) -> List[AttributeGroup]:
    updated = _copy_groups(groups)
    group = _group_at(updated, group_index)
    _child_at(group, child_index)
    del group.child_attributes[child_index]
    return updated


# --- Global attribute import ---

def import_global_attribute(
    groups: Sequence[AttributeGroup],
    group_index: int,
    attribute: GlobalAttribute,
    child_index: Optional[int] = None,
) -> List[AttributeGroup]:
    """
    Copies a global attribute's name and values into a group's parent
    attribute, or into one of its child attributes when `child_index` is given.

    The copy is a template: later changes to the global attribute do not reach
    the group. Existing parent value ids are reused position by position so
    children stay attached to the same slots.
    """
    updated = _copy_groups(groups)
    group = _group_at(updated, group_index)

    if child_index is not None:
        child = _child_at(group, child_index)
        child.name = attribute.name
        child.values = list(attribute.values)
        return updated

    old_ids = group.parent_attribute.value_ids
    values = list(attribute.values)
    group.parent_attribute = ParentAttribute(
        name=attribute.name,
        values=values,
        value_ids=old_ids[:len(values)],
    )
    return updated


# --- Legacy attributes ---

def add_legacy_attribute(legacy: Sequence[LegacyAttribute], name: str = "", value: str = "") -> List[LegacyAttribute]:
    return [*(a.model_copy() for a in legacy), LegacyAttribute(name=name, value=value)]


def set_legacy_attribute(
    legacy: Sequence[LegacyAttribute],
    index: int,
    name: Optional[str] = None,
    value: Optional[str] = None,
) -> List[LegacyAttribute]:
    updated = [a.model_copy() for a in legacy]
    _check_position(index, len(updated), "index", "Legacy attribute")
    if name is not None:
        updated[index].name = name
    if value is not None:
        updated[index].value = value
    return updated


def remove_legacy_attribute(legacy: Sequence[LegacyAttribute], index: int) -> List[LegacyAttribute]:
    updated = [a.model_copy() for a in legacy]
    _check_position(index, len(updated), "index", "Legacy attribute")
    del updated[index]
    return updated


def import_global_legacy_attribute(legacy: Sequence[LegacyAttribute], attribute: GlobalAttribute) -> List[LegacyAttribute]:
    """
    Adds one legacy pair per value of a global attribute. Skipped when an
    attribute with the same name (case-insensitive) already exists or the
    global attribute has no values. A lone blank placeholder row is replaced.
    """
    existing = {(a.name or "").strip().lower() for a in legacy}
    if attribute.name.strip().lower() in existing or not attribute.values:
        return [a.model_copy() for a in legacy]

    kept = [a.model_copy() for a in legacy]
    if len(kept) == 1 and not kept[0].name and not kept[0].value:
        kept = []
    return kept + [LegacyAttribute(name=attribute.name, value=value) for value in attribute.values]
