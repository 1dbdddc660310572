import itertools
import logging
from typing import Dict, List, Optional, Sequence

from catalog_variants.models.schemas import (
    AttributeGroup,
    AttributeSelection,
    ChildAttribute,
    HierarchicalCombination,
    LegacyAttribute,
    LegacyCombination,
    VariantCombination,
)

logger = logging.getLogger(__name__)


def resolve_child_scope(group: AttributeGroup, child: ChildAttribute) -> Optional[int]:
    """
    Returns the position of the parent value a child attribute belongs to,
    or None when the reference does not resolve.

    A child carrying a parent value id is scoped by that id; children written
    before ids existed fall back to their positional parent_value_index.
    """
    parent = group.parent_attribute
    if child.parent_value_id is not None:
        try:
            return parent.value_ids.index(child.parent_value_id)
        except ValueError:
            return None
    if 0 <= child.parent_value_index < len(parent.values):
        return child.parent_value_index
    return None


def _children_by_parent_value(group: AttributeGroup) -> Dict[int, List[ChildAttribute]]:
    scoped: Dict[int, List[ChildAttribute]] = {}
    for child in group.child_attributes:
        position = resolve_child_scope(group, child)
        if position is None:
            # Stale reference while the merchant is mid-edit; treated as no children.
            logger.debug(
                f"Ignoring child attribute '{child.name}' with unresolved parent reference "
                f"(index={child.parent_value_index}, id={child.parent_value_id})."
            )
            continue
        scoped.setdefault(position, []).append(child)
    return scoped


def generate_hierarchical_variants(groups: Sequence[AttributeGroup]) -> List[HierarchicalCombination]:
    """
    Expands attribute groups into combinations, one per parent value without
    children, or one per (parent value, child value) pair.

    Example: Size [2mm, 3mm] where 2mm has Color [Red, Blue] and Finish [Matte]
        -> [Size:2mm|Color:Red], [Size:2mm|Color:Blue], [Size:2mm|Finish:Matte], [Size:3mm]

    Children of the same parent value are NOT multiplied against each other.
    """
    variants: List[HierarchicalCombination] = []

    for group in groups:
        parent_name = group.parent_attribute.name.strip()
        if not parent_name:
            continue

        scoped_children = _children_by_parent_value(group)

        for position, raw_parent_value in enumerate(group.parent_attribute.values):
            parent_value = (raw_parent_value or "").strip()
            if not parent_value:
                continue

            children = scoped_children.get(position, [])
            if not children:
                variants.append(HierarchicalCombination(selections=[
                    AttributeSelection(parent_name=parent_name, parent_value=parent_value)
                ]))
                continue

            for child in children:
                child_name = child.name.strip()
                if not child_name:
                    continue
                for raw_child_value in child.values:
                    child_value = (raw_child_value or "").strip()
                    if not child_value:
                        continue
                    variants.append(HierarchicalCombination(selections=[
                        AttributeSelection(
                            parent_name=parent_name,
                            parent_value=parent_value,
                            child_name=child_name,
                            child_value=child_value,
                        )
                    ]))

    return variants


def group_legacy_values(legacy: Sequence[LegacyAttribute]) -> Dict[str, List[str]]:
    """
    Groups legacy (name, value) pairs by name, in first-seen order, dropping
    blank names/values and duplicate values within a name.
    """
    values_by_name: Dict[str, List[str]] = {}
    for attr in legacy:
        name = (attr.name or "").strip()
        value = (attr.value or "").strip()
        if not name or not value:
            continue
        values = values_by_name.setdefault(name, [])
        if value not in values:
            values.append(value)
    return values_by_name


def generate_legacy_variants(legacy: Sequence[LegacyAttribute]) -> List[LegacyCombination]:
    """
    Cartesian product of all legacy attribute value sets.
    {Color: [Red, Blue], Size: [S, M]} -> 4 combinations, the first name varying slowest.
    """
    values_by_name = group_legacy_values(legacy)
    if not values_by_name:
        return []

    names = list(values_by_name.keys())
    return [
        LegacyCombination(pairs=dict(zip(names, combo)))
        for combo in itertools.product(*(values_by_name[name] for name in names))
    ]


def generate_variants(
    groups: Sequence[AttributeGroup],
    legacy: Sequence[LegacyAttribute],
) -> List[VariantCombination]:
    """
    Full variant set of a product: hierarchical combinations first, then the
    legacy ones. The order is significant; the resolver's tie-break relies on it.
    """
    hierarchical = generate_hierarchical_variants(groups)
    flat = generate_legacy_variants(legacy)
    logger.debug(f"Generated {len(hierarchical)} hierarchical and {len(flat)} legacy variants.")
    return [*hierarchical, *flat]
