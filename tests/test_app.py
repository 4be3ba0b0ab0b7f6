import json

import pytest

from chatbot import VetCareAssistant
from conftest import FakeSource
from corpus import CorpusCache


def _post_json(client, url, payload):
    return client.post(url, data=json.dumps(payload), content_type="application/json")


def test_health(app_client):
    _, client = app_client

    response = client.get("/health")

    assert response.status_code == 200
    assert response.get_json() == {"success": True, "status": "ok"}


def test_chat_returns_turn(app_client):
    _, client = app_client

    response = _post_json(client, "/api/chat", {"message": "fever in cattle", "language": "en"})

    assert response.status_code == 200
    data = response.get_json()
    assert data["success"] is True
    turn = data["response"]
    assert turn["relatedDiseases"][0]["id"] == "rec_001"
    assert turn["isAiGenerated"] is False
    assert turn["intent"] == "symptom_query"
    assert "Medical Disclaimer" in turn["text"]


def test_chat_with_empty_message_returns_ready_text(app_client):
    _, client = app_client

    response = _post_json(client, "/api/chat", {"message": "  "})

    assert response.status_code == 200
    assert response.get_json()["response"]["text"].startswith("Ready to search")


def test_chat_in_tamil_keeps_unicode(app_client):
    _, client = app_client

    response = _post_json(client, "/api/chat", {"message": "வணக்கம்", "language": "ta"})

    assert response.status_code == 200
    assert response.get_json()["response"]["intent"] == "greeting"
    assert "வணக்கம்" in response.get_data(as_text=True)


def test_search(app_client):
    _, client = app_client

    response = client.get("/api/search", query_string={"q": "fever", "mode": "symptoms"})

    data = response.get_json()
    assert response.status_code == 200
    assert data["count"] == 1
    assert data["data"][0]["name"] == "Haemorrhagic Septicaemia"
    assert data["mode"] == "symptoms"
    assert data["language"] == "en"


def test_search_rejects_unknown_mode(app_client):
    _, client = app_client

    response = client.get("/api/search", query_string={"q": "fever", "mode": "colour"})

    assert response.status_code == 400
    assert response.get_json()["success"] is False


def test_list_diseases_paginates(app_client):
    _, client = app_client

    response = client.get("/api/diseases", query_string={"limit": 2, "page": 1})

    data = response.get_json()
    assert [item["id"] for item in data["data"]] == ["rec_001", "rec_002"]
    assert data["pagination"] == {"current": 1, "limit": 2, "total": 3, "pages": 2}


def test_list_diseases_filters_and_localises(app_client):
    _, client = app_client

    response = client.get("/api/diseases", query_string={"animal": "buffalo", "language": "ta"})

    data = response.get_json()
    assert [item["name"] for item in data["data"]] == ["முலைக்காம்பு அடைப்பு"]
    assert data["filters"]["animal"] == "buffalo"
    assert data["filters"]["language"] == "ta"


def test_list_diseases_rejects_bad_arguments(app_client):
    _, client = app_client

    assert client.get("/api/diseases", query_string={"severity": "Critical"}).status_code == 400
    assert client.get("/api/diseases", query_string={"limit": "lots"}).status_code == 400
    assert client.get("/api/diseases", query_string={"page": 0}).status_code == 400


def test_get_disease(app_client):
    _, client = app_client

    found = client.get("/api/diseases/rec_003")
    missing = client.get("/api/diseases/rec_999")

    assert found.status_code == 200
    assert found.get_json()["data"]["name"] == "Ringworm"
    assert missing.status_code == 404
    assert missing.get_json()["error"] == "Disease not found."


def test_create_disease_refreshes_corpus(app_client):
    app_module, client = app_client
    assert client.get("/api/search", query_string={"q": "bloat"}).get_json()["count"] == 0

    response = _post_json(
        client,
        "/api/diseases",
        {
            "name": "Bloat",
            "treatmentName": "Bloat Relief",
            "symptoms": ["Bloat on left side"],
            "severity": "High",
            "affectedAnimals": ["Goats"],
        },
    )

    assert response.status_code == 201
    assert response.get_json()["data"]["id"] == "rec_004"
    assert client.get("/api/search", query_string={"q": "bloat"}).get_json()["count"] == 1


def test_create_disease_validation_error(app_client):
    _, client = app_client

    response = _post_json(client, "/api/diseases", {"treatmentName": "Nameless"})

    assert response.status_code == 400
    assert response.get_json()["success"] is False


def test_model_metrics(app_client):
    _, client = app_client
    _post_json(client, "/api/chat", {"message": "fever in cattle"})

    data = client.get("/api/metrics/model").get_json()

    assert data["success"] is True
    assert data["oracle"]["state"] == "failed"
    assert data["corpus"]["records"] == 3
    assert data["latency"]["api.chat"]["count"] >= 1


def test_unavailable_corpus_returns_503(app_client, monkeypatch, lexicon, null_oracle):
    app_module, client = app_client
    source = FakeSource([])
    source.fail = True
    monkeypatch.setattr(app_module, "assistant", VetCareAssistant(CorpusCache(source), oracle=null_oracle, lexicon=lexicon))

    response = client.get("/api/search", query_string={"q": "fever"})

    assert response.status_code == 503
    assert response.get_json()["success"] is False


def test_unknown_endpoint(app_client):
    _, client = app_client

    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.get_json()["error"] == "Endpoint not found."


def test_chat_with_non_object_body_returns_ready_turn(app_client):
    _, client = app_client

    response = _post_json(client, "/api/chat", ["fever"])

    assert response.status_code == 200
    assert response.get_json()["response"]["text"].startswith("Ready to search")


@pytest.mark.parametrize(
    "payload",
    [
        ["Bloat"],
        {"name": "Bloat", "treatmentName": "Bloat Relief", "translations": ["ta"]},
    ],
)
def test_create_disease_rejects_malformed_payload(app_client, payload):
    _, client = app_client

    response = _post_json(client, "/api/diseases", payload)

    assert response.status_code == 400
    assert response.get_json()["success"] is False


def test_exit_hook_shuts_down_oracle(app_client):
    app_module, client = app_client

    app_module._shutdown_services()

    assert app_module.assistant.oracle.wait_until_ready() is False
    response = _post_json(client, "/api/chat", {"message": "fever in cattle"})
    assert response.get_json()["response"]["isAiGenerated"] is False
