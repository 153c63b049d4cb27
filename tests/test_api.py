import pytest
from fastapi.testclient import TestClient

from medicoweb.main import create_app
from medicoweb.routers import dose as dose_router
from medicoweb.schemas.monograph import Monograph
from medicoweb.schemas.search import ImageRef
from medicoweb.services import search_service
from medicoweb.services.dose_service import DoseCalculationError
from medicoweb.services.image_service import ImageGenerationError
from medicoweb.services.monograph_service import MonographGenerationError


@pytest.fixture
def client():
    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture
def fake_search(monkeypatch, monograph_payload):
    calls = []

    async def fake_monograph(name):
        calls.append(("monograph", name))
        return Monograph.model_validate({**monograph_payload, "drugName": name})

    async def fake_image(name):
        calls.append(("image", name))
        raise ImageGenerationError("no image")

    monkeypatch.setattr(search_service, "request_monograph", fake_monograph)
    monkeypatch.setattr(search_service, "request_image", fake_image)
    return calls


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_schema_endpoint(client):
    schema = client.get("/api/schema").json()
    assert schema["type"] == "OBJECT"
    assert "counsellingTips" in schema["required"]


def test_search_returns_camel_case_state_and_view(client, fake_search):
    response = client.post("/api/search", json={"drugName": "Paracetamol"})

    assert response.status_code == 200
    body = response.json()
    assert body["sessionId"]
    assert body["state"]["loading"] is False
    assert body["state"]["hasSearched"] is True
    assert body["state"]["error"] is None
    assert body["state"]["image"] is None
    assert body["state"]["monograph"]["drugName"] == "Paracetamol"
    assert body["state"]["monograph"]["adverseDrugReactions"]["blackBoxWarning"] is None
    assert body["view"] == {
        "kind": "monograph",
        "message": None,
        "showImage": False,
        "doseCalculatorDrug": "Paracetamol",
    }
    assert sorted(fake_search) == [("image", "Paracetamol"), ("monograph", "Paracetamol")]


def test_blank_search_is_a_validation_error(client, fake_search):
    body = client.post("/api/search", json={"drugName": "   "}).json()

    assert body["state"]["error"] == "Please enter a drug name."
    assert body["view"]["kind"] == "error"
    assert fake_search == []


def test_session_state_can_be_polled(client, fake_search):
    session_id = client.post("/api/search", json={"drugName": "Ibuprofen"}).json()["sessionId"]

    body = client.get(f"/api/search/{session_id}").json()

    assert body["sessionId"] == session_id
    assert body["state"]["monograph"]["drugName"] == "Ibuprofen"


def test_unknown_session_is_404(client):
    assert client.get("/api/search/does-not-exist").status_code == 404


def test_content_failure_is_reported(client, monkeypatch):
    async def failing_monograph(name):
        raise MonographGenerationError("boom")

    async def fake_image(name):
        return ImageRef(data_uri="data:image/png;base64,aGVsbG8=")

    monkeypatch.setattr(search_service, "request_monograph", failing_monograph)
    monkeypatch.setattr(search_service, "request_image", fake_image)

    body = client.post("/api/search", json={"drugName": "Paracetamol"}).json()

    assert body["state"]["monograph"] is None
    assert body["view"]["kind"] == "error"
    assert body["view"]["showImage"] is False
    assert body["state"]["error"].startswith("Failed to generate the drug monograph.")


def test_dose_success(client, monkeypatch):
    async def fake_dose(drug_name, age, weight):
        assert (drug_name, age, weight) == ("Paracetamol", 35, 70.0)
        return "650 mg every 6 hours. This is not medical advice."

    monkeypatch.setattr(dose_router, "request_dose", fake_dose)

    response = client.post("/api/dose", json={"drugName": "Paracetamol", "age": 35, "weight": 70})

    assert response.status_code == 200
    body = response.json()
    assert body["dose"] == "650 mg every 6 hours. This is not medical advice."
    assert "not a substitute" in body["disclaimer"]


@pytest.mark.parametrize(
    "payload,detail",
    [
        ({"drugName": "Paracetamol", "age": 0, "weight": 70}, "Age and weight must be positive numbers."),
        ({"drugName": "Paracetamol", "age": 35, "weight": None}, "Please enter both age and weight."),
        ({"drugName": "Paracetamol", "age": 35}, "Please enter both age and weight."),
    ],
)
def test_dose_validation_makes_no_call(client, monkeypatch, payload, detail):
    calls = []

    async def fake_dose(*args):
        calls.append(args)
        return "unused"

    monkeypatch.setattr(dose_router, "request_dose", fake_dose)

    response = client.post("/api/dose", json=payload)

    assert response.status_code == 422
    assert response.json()["detail"] == detail
    assert calls == []


def test_dose_failure_is_scoped_and_retryable(client, monkeypatch):
    attempts = []

    async def flaky_dose(drug_name, age, weight):
        attempts.append(drug_name)
        if len(attempts) == 1:
            raise DoseCalculationError("Failed to calculate dose for Paracetamol.")
        return "500 mg. Not medical advice."

    monkeypatch.setattr(dose_router, "request_dose", flaky_dose)
    payload = {"drugName": "Paracetamol", "age": 35, "weight": 70}

    first = client.post("/api/dose", json=payload)
    second = client.post("/api/dose", json=payload)

    assert first.status_code == 502
    assert first.json()["detail"] == "Failed to calculate dose. Please try again."
    assert second.status_code == 200
    assert second.json()["dose"] == "500 mg. Not medical advice."


@pytest.mark.parametrize("weight", ["NaN", "Infinity"])
def test_dose_rejects_non_finite_weight(client, monkeypatch, weight):
    calls = []

    async def fake_dose(*args):
        calls.append(args)
        return "unused"

    monkeypatch.setattr(dose_router, "request_dose", fake_dose)

    response = client.post(
        "/api/dose",
        content=f'{{"drugName": "Paracetamol", "age": 35, "weight": {weight}}}',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 422
    assert response.json()["detail"] == "Age and weight must be positive numbers."
    assert calls == []
