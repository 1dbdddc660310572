from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from catalog_variants.main import app

client = TestClient(app)

CDN = "https://cdn.example.com/products"

GROUPS = [{
    "parentAttribute": {"name": "Size", "values": ["2mm", "3mm"]},
    "childAttributes": [{"name": "Color", "values": "Red, Blue", "parentValueIndex": 0}],
}]

RED_KEY = "hierarchical:Size:2mm|Color:Red"


def media(name):
    return {"url": f"{CDN}/{name}", "name": name, "type": "image"}


def test_read_root():
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"message": "Welcome to the Catalog Variant Service REST API."}


def test_preview_variants():
    response = client.post("/api/v1/products/variants/preview", json={
        "attributeGroups": GROUPS,
        "attributes": [{"name": "Material", "value": "Steel"}],
        "bindings": {RED_KEY: [media("red.jpg")]},
    })
    assert response.status_code == 200
    data = response.json()
    assert [v["key"] for v in data["variants"]] == [
        RED_KEY,
        "hierarchical:Size:2mm|Color:Blue",
        "hierarchical:Size:3mm",
        "legacy:Material:Steel",
    ]
    assert data["variants"][0]["imageCount"] == 1
    assert data["variants"][0]["attributes"][0]["childValue"] == "Red"
    assert data["variants"][3]["attributes"] == {"Material": "Steel"}
    assert data["bindings"]["hierarchical:Size:3mm"] == []
    assert data["warnings"] == []


def test_preview_reports_warnings():
    response = client.post("/api/v1/products/variants/preview", json={
        "attributeGroups": [{
            "parentAttribute": {"name": "Size", "values": ["2mm"]},
            "childAttributes": [{"name": "Color", "values": ["Red"], "parentValueIndex": 5}],
        }],
    })
    assert response.status_code == 200
    warnings = response.json()["warnings"]
    assert len(warnings) == 1
    assert warnings[0]["error_type"] == "LOOKUP"


def test_select_media_for_hierarchical_variant():
    response = client.post("/api/v1/products/variants/media", json={
        "bindings": {},
        "variant": [{"parentName": "Size", "parentValue": "2mm", "childName": "Color", "childValue": "Red"}],
        "media": [media("red.jpg")],
    })
    assert response.status_code == 200
    data = response.json()
    assert data["key"] == RED_KEY
    assert data["bindings"][RED_KEY] == [media("red.jpg")]


def test_select_media_for_default_images():
    response = client.post("/api/v1/products/variants/media", json={"media": [media("main.jpg")]})
    assert response.status_code == 200
    assert response.json()["key"] == ""
    assert response.json()["bindings"][""] == [media("main.jpg")]


def test_select_media_over_limit_returns_422():
    with patch("catalog_variants.routes.products_api.settings") as mock_settings:
        mock_settings.MEDIA_MAX_SELECTION = 1
        response = client.post("/api/v1/products/variants/media", json={
            "variant": {"Color": "Red"},
            "media": [media("a.jpg"), media("b.jpg")],
        })
    assert response.status_code == 422
    assert "at most 1 are allowed" in response.json()["detail"]


@pytest.mark.parametrize("has_variant_images, expected_variants", [(True, 3), (False, 0)])
def test_build_payload(has_variant_images, expected_variants):
    response = client.post("/api/v1/products/variants/payload", json={
        "attributeGroups": GROUPS,
        "images": [media("main.jpg")],
        "hasVariantImages": has_variant_images,
        "bindings": {RED_KEY: [media("red.jpg")], "legacy:Color:Green": [media("green.jpg")]},
    })
    assert response.status_code == 200
    data = response.json()
    assert data["images"] == [f"{CDN}/main.jpg"]
    assert data["hasVariantImages"] is has_variant_images
    assert len(data["variants"]) == expected_variants
    if has_variant_images:
        assert data["variants"][0]["images"] == [f"{CDN}/red.jpg"]


def test_build_payload_falls_back_to_default_binding():
    response = client.post("/api/v1/products/variants/payload", json={
        "bindings": {"": [media("main.jpg")]},
    })
    assert response.status_code == 200
    assert response.json()["images"] == [f"{CDN}/main.jpg"]


def test_load_bindings_for_editing():
    response = client.post("/api/v1/products/variants/bindings", json={
        "images": [f"{CDN}/main.jpg"],
        "hasVariantImages": True,
        "variants": [
            {"attributes": [{"parentName": "Size", "parentValue": "3mm"}], "images": [f"{CDN}/3mm.jpg"]},
        ],
    })
    assert response.status_code == 200
    data = response.json()
    assert data["defaultImages"] == [media("main.jpg")]
    assert data["bindings"]["hierarchical:Size:3mm"] == [media("3mm.jpg")]


def test_import_global_attribute_as_new_group():
    response = client.post("/api/v1/products/variants/attributes/import", json={
        "attributeGroups": GROUPS,
        "attribute": {"_id": "attr-7", "name": "Finish", "values": "Matte, Gloss"},
    })
    assert response.status_code == 200
    groups = response.json()["attributeGroups"]
    assert len(groups) == 2
    assert groups[1]["parentAttribute"]["name"] == "Finish"
    assert groups[1]["parentAttribute"]["values"] == ["Matte", "Gloss"]
    assert response.json()["warnings"] == []


def test_import_global_attribute_into_child():
    response = client.post("/api/v1/products/variants/attributes/import", json={
        "attributeGroups": GROUPS,
        "attribute": {"name": "Finish", "values": ["Matte"]},
        "groupIndex": 0,
        "childIndex": 0,
    })
    assert response.status_code == 200
    child = response.json()["attributeGroups"][0]["childAttributes"][0]
    assert child["name"] == "Finish"
    assert child["values"] == ["Matte"]
    assert child["parentValueIndex"] == 0


def test_import_global_attribute_into_legacy_list():
    response = client.post("/api/v1/products/variants/attributes/import", json={
        "attributes": [{"name": "", "value": ""}],
        "attribute": {"name": "Color", "values": ["Red", "Blue"]},
        "target": "legacy",
    })
    assert response.status_code == 200
    assert response.json()["attributes"] == [
        {"name": "Color", "value": "Red"},
        {"name": "Color", "value": "Blue"},
    ]


def test_import_global_attribute_into_missing_group_returns_422():
    response = client.post("/api/v1/products/variants/attributes/import", json={
        "attributeGroups": GROUPS,
        "attribute": {"name": "Finish", "values": ["Matte"]},
        "groupIndex": 4,
    })
    assert response.status_code == 422
    assert "Attribute group position 4 does not exist" in response.json()["detail"]


def test_remove_parent_value_drops_scoped_children():
    response = client.post("/api/v1/products/variants/attributes/remove-value", json={
        "attributeGroups": GROUPS,
        "groupIndex": 0,
        "valueIndex": 0,
    })
    assert response.status_code == 200
    group = response.json()["attributeGroups"][0]
    assert group["parentAttribute"]["values"] == ["3mm"]
    assert group["childAttributes"] == []
