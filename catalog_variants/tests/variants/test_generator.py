import pytest

from catalog_variants.models.schemas import (
    AttributeGroup,
    AttributeSelection,
    ChildAttribute,
    HierarchicalCombination,
    LegacyAttribute,
    LegacyCombination,
)
from catalog_variants.variants.generator import (
    generate_hierarchical_variants,
    generate_legacy_variants,
    generate_variants,
    group_legacy_values,
)


def make_group(name, values, children=()):
    return AttributeGroup.model_validate({
        "parentAttribute": {"name": name, "values": list(values)},
        "childAttributes": [
            {"name": c_name, "values": list(c_values), "parentValueIndex": idx}
            for c_name, c_values, idx in children
        ],
    })


def legacy(*pairs):
    return [LegacyAttribute(name=n, value=v) for n, v in pairs]


@pytest.fixture
def size_group():
    return make_group(
        "Size", ["2mm", "3mm"],
        children=[
            ("Color", ["Red", "Blue"], 0),
            ("Finish", ["Matte", "Gloss"], 0),
        ],
    )


# --- Hierarchical pass ---

def test_parent_values_without_children_emit_one_variant_each():
    variants = generate_hierarchical_variants([make_group("Size", ["S", "M", "L"])])
    assert [v.attribute_map() for v in variants] == [{"Size": "S"}, {"Size": "M"}, {"Size": "L"}]
    assert all(len(v.selections) == 1 for v in variants)


def test_children_are_not_cross_multiplied(size_group):
    variants = generate_hierarchical_variants([size_group])
    two_mm = [v for v in variants if v.selections[0].parent_value == "2mm"]
    # Two children with two values each: 2 + 2, not 2 x 2
    assert len(two_mm) == 4
    assert [(s.child_name, s.child_value) for v in two_mm for s in v.selections] == [
        ("Color", "Red"), ("Color", "Blue"), ("Finish", "Matte"), ("Finish", "Gloss"),
    ]


def test_parent_value_without_children_follows_child_variants(size_group):
    variants = generate_hierarchical_variants([size_group])
    assert len(variants) == 5
    assert variants[-1].selections == [AttributeSelection(parent_name="Size", parent_value="3mm")]


def test_blank_group_name_is_skipped():
    variants = generate_hierarchical_variants([make_group("   ", ["S", "M"]), make_group("Size", ["S"])])
    assert [v.attribute_map() for v in variants] == [{"Size": "S"}]


def test_blank_values_are_skipped_and_values_trimmed():
    group = make_group(" Size ", ["", " 2mm ", "   "], children=[("Color", [" Red", "", "Blue "], 1)])
    variants = generate_hierarchical_variants([group])
    assert [v.attribute_map() for v in variants] == [
        {"Size": "2mm", "Color": "Red"},
        {"Size": "2mm", "Color": "Blue"},
    ]


def test_children_with_blank_names_produce_nothing():
    group = make_group("Size", ["2mm"], children=[("", ["Red"], 0)])
    assert generate_hierarchical_variants([group]) == []


def test_stale_parent_value_index_is_treated_as_no_children():
    group = make_group("Size", ["2mm"], children=[("Color", ["Red"], 4)])
    variants = generate_hierarchical_variants([group])
    assert [v.attribute_map() for v in variants] == [{"Size": "2mm"}]


def test_negative_parent_value_index_is_ignored():
    group = make_group("Size", ["2mm"], children=[("Color", ["Red"], -1)])
    assert [v.attribute_map() for v in generate_hierarchical_variants([group])] == [{"Size": "2mm"}]


def test_child_scoped_by_value_id_wins_over_index():
    group = make_group("Size", ["2mm", "3mm"])
    three_mm_id = group.parent_attribute.value_ids[1]
    group.child_attributes = [
        ChildAttribute(name="Color", values=["Red"], parent_value_index=0, parent_value_id=three_mm_id)
    ]
    variants = generate_hierarchical_variants([group])
    assert [v.attribute_map() for v in variants] == [
        {"Size": "2mm"},
        {"Size": "3mm", "Color": "Red"},
    ]


def test_child_with_unknown_value_id_is_ignored():
    group = AttributeGroup.model_validate({
        "parentAttribute": {"name": "Size", "values": ["2mm"]},
        "childAttributes": [{"name": "Color", "values": ["Red"], "parentValueIndex": 0, "parentValueId": "gone"}],
    })
    assert [v.attribute_map() for v in generate_hierarchical_variants([group])] == [{"Size": "2mm"}]


# --- Legacy pass ---

def test_legacy_cartesian_product_is_complete():
    variants = generate_legacy_variants(legacy(
        ("Color", "Red"), ("Color", "Blue"), ("Size", "S"), ("Size", "M"),
    ))
    assert [v.pairs for v in variants] == [
        {"Color": "Red", "Size": "S"},
        {"Color": "Red", "Size": "M"},
        {"Color": "Blue", "Size": "S"},
        {"Color": "Blue", "Size": "M"},
    ]


def test_legacy_values_are_deduplicated_and_blanks_dropped():
    grouped = group_legacy_values(legacy(
        ("Color", "Red"), ("Color", " Red "), ("", "Blue"), ("Size", " "), ("Size", "S"),
    ))
    assert grouped == {"Color": ["Red"], "Size": ["S"]}


def test_no_valid_legacy_attributes_yield_no_variants():
    assert generate_legacy_variants(legacy(("", ""), ("Color", ""))) == []


# --- Combined ---

def test_hierarchical_variants_come_before_legacy(size_group):
    variants = generate_variants([size_group], legacy(("Material", "Steel")))
    assert all(isinstance(v, HierarchicalCombination) for v in variants[:5])
    assert variants[5] == LegacyCombination(pairs={"Material": "Steel"})


def test_generation_is_deterministic(size_group):
    attrs = legacy(("Color", "Red"), ("Color", "Blue"), ("Size", "S"))
    assert generate_variants([size_group], attrs) == generate_variants([size_group], attrs)


def test_empty_input_generates_nothing():
    assert generate_variants([], []) == []
