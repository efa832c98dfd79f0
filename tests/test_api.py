"""Tests for the HTTP API."""

import json

from fastapi.testclient import TestClient

from macro_estimator.api.app import create_app
from macro_estimator.containers import AppContainer
from macro_estimator.errors import RateLimitedError
from tests.conftest import (
    FakeFdcClient,
    FakeLanguageModelClient,
    FakeOpenFoodFactsClient,
    intent_payload,
)


def test_health(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_estimate_returns_totals(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.post("/estimate", json={"description": "2 slices of bacon"})

    assert response.status_code == 200
    data = response.json()
    assert abs(data["total"]["protein"] - 7.4) < 1e-9
    assert abs(data["total"]["kcal"] - 108.2) < 1e-9
    assert data["partial"] is False
    assert data["items"][0]["weight_grams"] == 20


def test_estimate_partial_lists_unresolved(
    container: AppContainer, language_model: FakeLanguageModelClient
) -> None:
    language_model.text = intent_payload(("bacon", 20), ("moon cheese", 30))
    client = TestClient(create_app(container))

    response = client.post("/estimate", json={"description": "bacon and moon cheese"})

    assert response.status_code == 200
    data = response.json()
    assert data["partial"] is True
    assert data["unresolved_terms"] == ["moon cheese"]


def test_estimate_all_failed_is_422(
    container: AppContainer,
    language_model: FakeLanguageModelClient,
    fdc_client: FakeFdcClient,
) -> None:
    language_model.text = intent_payload(("moon cheese", 30))
    client = TestClient(create_app(container))

    response = client.post("/estimate", json={"description": "moon cheese"})

    assert response.status_code == 422
    data = response.json()
    assert data["error"] == "AllLookupsFailedError"
    assert data["unresolved_terms"] == ["moon cheese"]
    assert fdc_client.queries == ["moon cheese"]


def test_estimate_without_credentials_is_503(container: AppContainer) -> None:
    container.estimator.intent_parser = None
    client = TestClient(create_app(container))

    response = client.post("/estimate", json={"description": "toast"})

    assert response.status_code == 503
    assert response.json()["error"] == "MissingCredentialsError"


def test_quick_estimate_rate_limited_is_429(
    container: AppContainer, language_model: FakeLanguageModelClient
) -> None:
    language_model.error = RateLimitedError("quota", status_code=429)
    client = TestClient(create_app(container))

    response = client.post("/estimate/quick", json={"description": "toast"})

    assert response.status_code == 429


def test_quick_estimate_returns_model_totals(
    container: AppContainer, language_model: FakeLanguageModelClient
) -> None:
    language_model.text = json.dumps(
        {
            "summary": "Toast",
            "total_calories": 160,
            "total_protein": 5,
            "total_carbs": 28,
            "total_fat": 2,
            "items": [],
        }
    )
    client = TestClient(create_app(container))

    response = client.post("/estimate/quick", json={"description": "two toast"})

    assert response.status_code == 200
    assert response.json()["total_calories"] == 160


def test_label_parses_raw_body(
    container: AppContainer, language_model: FakeLanguageModelClient
) -> None:
    language_model.text = '{"description": "Cereal", "protein_g": 3, "carbs_g": 24}'
    client = TestClient(create_app(container))

    response = client.post(
        "/label", content=b"\xff\xd8\xffjpeg", headers={"Content-Type": "image/jpeg"}
    )

    assert response.status_code == 200
    assert response.json()["description"] == "Cereal"
    assert response.json()["fat_g"] == 0


def test_label_empty_body_is_400(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.post("/label", content=b"")

    assert response.status_code == 400
    assert response.json()["error"] == "ImageEncodingError"


def test_barcode_found_and_missing(
    container: AppContainer, off_client: FakeOpenFoodFactsClient
) -> None:
    off_client.products["4000417025005"] = {
        "product_name": "Oat Bar",
        "nutriments": {"proteins_100g": 8, "carbohydrates_100g": 60, "fat_100g": 15},
    }
    client = TestClient(create_app(container))

    found = client.get("/barcode/4000417025005")
    missing = client.get("/barcode/1111111111111")

    assert found.status_code == 200
    assert found.json()["quantity"] == 100
    assert found.json()["basis"] == "per100g"
    assert missing.status_code == 404


def test_calories_sanitizes_input(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/calories", json={"fat": "10", "carbs": "abc", "protein": 20}
    )

    assert response.status_code == 200
    assert response.json() == {"kcal": 170.0}


def test_scale_template_endpoint(container: AppContainer) -> None:
    client = TestClient(create_app(container))
    template = {
        "name": "Chili",
        "protein": 30,
        "fat": 10,
        "carbs": 20,
        "portion_size": 300,
        "unit": "g",
    }

    scaled = client.post(
        "/templates/scale", json={"template": template, "entry": "150 g chili"}
    )
    mismatch = client.post(
        "/templates/scale", json={"template": template, "portion": 1, "unit": "cups"}
    )

    assert scaled.status_code == 200
    assert scaled.json()["protein"] == 15
    assert scaled.json()["kcal"] == 15 * 4 + 10 * 4 + 5 * 9
    assert mismatch.status_code == 422


def test_malformed_model_output_is_502(
    container: AppContainer, language_model: FakeLanguageModelClient
) -> None:
    language_model.text = "not json at all"
    client = TestClient(create_app(container))

    response = client.post("/estimate", json={"description": "toast"})

    assert response.status_code == 502
    assert response.json()["error"] == "MalformedResponseError"


def test_scale_template_bare_quantity_entry(container: AppContainer) -> None:
    client = TestClient(create_app(container))
    template = {
        "name": "Rice",
        "protein": 3,
        "fat": 0,
        "carbs": 28,
        "portion_size": 100,
        "unit": "g",
    }

    response = client.post(
        "/templates/scale", json={"template": template, "entry": "150 g"}
    )

    assert response.status_code == 200
    assert response.json()["protein"] == 4.5
    assert response.json()["carbs"] == 42
