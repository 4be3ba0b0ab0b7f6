import json

import pandas as pd
import pytest

from record_store import RecordStore, RecordValidationError
from records import Severity


@pytest.fixture()
def store(records_file):
    return RecordStore(str(records_file))


def test_fetch_sorts_by_last_updated(store):
    assert [record.id for record in store.fetch_records()] == ["rec_001", "rec_002", "rec_003"]


@pytest.mark.parametrize(
    "filters,expected",
    [
        ({"search": "FEVER"}, ["rec_001"]),
        ({"search": "turmeric"}, ["rec_002", "rec_003"]),
        ({"severity": "Low"}, ["rec_003"]),
        ({"animal": "buffalo"}, ["rec_002"]),
        ({"animal": "cattle", "search": "neem"}, ["rec_002"]),
    ],
)
def test_fetch_filters(store, filters, expected):
    assert [record.id for record in store.fetch_records(**filters)] == expected
    assert store.count_records(**filters) == len(expected)


def test_fetch_paginates(store):
    assert [record.id for record in store.fetch_records(limit=2, page=2)] == ["rec_003"]
    assert store.fetch_records(limit=2, page=3) == []


def test_inactive_records_are_hidden(records_file):
    documents = json.loads(records_file.read_text(encoding="utf-8"))
    documents[0]["isActive"] = False
    records_file.write_text(json.dumps(documents), encoding="utf-8")
    store = RecordStore(str(records_file))

    assert "rec_001" not in [record.id for record in store.fetch_records()]
    assert store.get_record("rec_001") is None


def test_get_record_keeps_translations(store):
    record = store.get_record("rec_002")

    assert record.translations["ta"]["name"] == "முலைக்காம்பு அடைப்பு"
    assert store.get_record("missing") is None


def test_add_record_generates_id_and_persists(store, records_file):
    record = store.add_record(
        {
            "name": "Bloat",
            "treatmentName": "Bloat Relief",
            "symptoms": ["Swollen left flank", "Discomfort"],
            "severity": "high",
            "affectedAnimals": ["Cattle"],
            "translations": {"ta": {"name": "வயிறு உப்புசம்"}},
        }
    )

    assert record.id == "rec_004"
    assert record.severity is Severity.HIGH
    assert store.fetch_records()[0].id == "rec_004"
    saved = json.loads(records_file.read_text(encoding="utf-8"))
    assert saved[-1]["translations"]["ta"]["name"] == "வயிறு உப்புசம்"


@pytest.mark.parametrize(
    "payload,message",
    [
        ({"treatmentName": "x"}, "name"),
        ({"name": "x"}, "Treatment name"),
        ({"name": "x", "treatmentName": "y", "severity": "Critical"}, "severity"),
        ({"name": "x", "treatmentName": "y", "translations": {"fr": {"name": "z"}}}, "fr"),
        ({"id": "rec_001", "name": "x", "treatmentName": "y"}, "already exists"),
        ({"name": "x", "treatmentName": "y", "translations": ["ta"]}, "Translations must be an object"),
    ],
)
def test_add_record_validation(store, payload, message):
    with pytest.raises(RecordValidationError, match=message):
        store.add_record(payload)


def test_import_csv(store, tmp_path):
    csv_path = tmp_path / "import.csv"
    pd.DataFrame(
        [
            {
                "name": "Foot Rot",
                "treatmentName": "Foot Rot Wash",
                "symptoms": "Lameness; Swelling between claws",
                "ingredients": "Neem leaves; Salt",
                "severity": "Medium",
                "affectedAnimals": "Cattle;Goats",
                "name_ta": "குளம்பு அழுகல்",
                "symptoms_ta": "நொண்டுதல்; வீக்கம்",
            },
            {
                "name": "",
                "treatmentName": "Orphan Treatment",
                "symptoms": "",
                "ingredients": "",
                "severity": "Low",
                "affectedAnimals": "",
                "name_ta": "",
                "symptoms_ta": "",
            },
        ]
    ).to_csv(csv_path, index=False)

    summary = store.import_csv(str(csv_path))

    assert summary == {"imported": 1, "skipped": 1}
    record = store.fetch_records(search="foot rot")[0]
    assert record.symptoms == ["Lameness", "Swelling between claws"]
    assert record.affected_animals == ["Cattle", "Goats"]
    assert record.translations["ta"]["symptoms"] == ["நொண்டுதல்", "வீக்கம்"]


def test_import_csv_missing_file(store, tmp_path):
    with pytest.raises(FileNotFoundError):
        store.import_csv(str(tmp_path / "absent.csv"))
