import importlib
import json
import sys
import threading
import time
from typing import Any, Dict, List

import pytest

from chatbot import VetCareAssistant
from corpus import CorpusCache
from lexicon import load_lexicon
from oracle import NullOracleBackend, OracleAdapter
from record_store import RecordStore
from records import Record

SAMPLE_DOCUMENTS: List[Dict[str, Any]] = [
    {
        "id": "rec_001",
        "name": "Haemorrhagic Septicaemia",
        "treatmentName": "Septicaemia Herbal Treatment",
        "symptoms": ["Fever", "Swelling of throat", "Nasal discharge"],
        "ingredients": ["Tulsi leaves", "black pepper", "jaggery"],
        "preparation": "Grind tulsi leaves and black pepper into a paste and mix with jaggery into small boluses.",
        "dosage": "Give orally twice a day for three days.",
        "severity": "High",
        "affectedAnimals": ["Cattle"],
        "translations": {},
        "category": "General",
        "isActive": True,
        "lastUpdated": "2025-01-12T10:00:00",
    },
    {
        "id": "rec_002",
        "name": "Teat Obstruction",
        "treatmentName": "Teat Obstruction Treatment 1",
        "symptoms": ["Teat obstructions due to granulation tissue after injury", "interferes with milk flow"],
        "ingredients": ["Neem leaf stalk", "turmeric powder", "butter or ghee"],
        "preparation": (
            "Cut neem leaf stalk to teat size, coat with turmeric and butter/ghee mixture. "
            "Clean teat opening thoroughly before every insertion and keep the stalk covered."
        ),
        "dosage": "Insert coated neem stalk into affected teat in an anti-clockwise direction after each milking session.",
        "severity": "Medium",
        "affectedAnimals": ["Cattle", "Buffaloes"],
        "translations": {
            "ta": {
                "name": "முலைக்காம்பு அடைப்பு",
                "treatmentName": "முலைக்காம்பு அடைப்பு சிகிச்சை 1",
                "symptoms": ["பால் ஓட்டத்தில் தடை"],
                "preparation": "",
            }
        },
        "category": "Udder Health",
        "isActive": True,
        "lastUpdated": "2025-01-11T10:00:00",
    },
    {
        "id": "rec_003",
        "name": "Ringworm",
        "treatmentName": "Ringworm Paste",
        "symptoms": ["Circular hairless patches", "Itching"],
        "ingredients": ["Neem oil", "Turmeric powder"],
        "preparation": "Mix neem oil with turmeric powder into paste.",
        "dosage": "Apply on lesions twice daily.",
        "severity": "Low",
        "affectedAnimals": ["Goats"],
        "translations": {},
        "category": "Skin",
        "isActive": True,
        "lastUpdated": "2025-01-10T10:00:00",
    },
]


def make_records() -> List[Record]:
    return [Record.from_document(document) for document in SAMPLE_DOCUMENTS]


class FakeSource:
    def __init__(self, records: List[Record]):
        self.records = list(records)
        self.calls = 0
        self.fail = False

    def fetch_records(self, language=None, search=None, severity=None, animal=None, limit=None, page=1):
        self.calls += 1
        if self.fail:
            raise ConnectionError("record store offline")
        return list(self.records)


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StaticBackend:
    name = "static"

    def __init__(self, answer: str = "fever", score: float = 0.9):
        self.answer_text = answer
        self.score = score
        self.loads = 0
        self.questions: List[tuple] = []

    def load(self) -> None:
        self.loads += 1

    def answer(self, question: str, context: str) -> Dict[str, Any]:
        self.questions.append((question, context))
        return {"answer": self.answer_text, "score": self.score}


class BlockingBackend(StaticBackend):
    name = "blocking"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.release = threading.Event()
        self._load_lock = threading.Lock()

    def load(self) -> None:
        with self._load_lock:
            self.loads += 1
        self.release.wait(timeout=5)


class BrokenBackend(StaticBackend):
    name = "broken"

    def load(self) -> None:
        self.loads += 1
        raise RuntimeError("model weights missing")


class SlowAnswerBackend(StaticBackend):
    name = "slow"

    def answer(self, question: str, context: str) -> Dict[str, Any]:
        time.sleep(0.5)
        return super().answer(question, context)


@pytest.fixture()
def sample_records() -> List[Record]:
    return make_records()


@pytest.fixture()
def lexicon():
    return load_lexicon()


@pytest.fixture()
def fake_source(sample_records) -> FakeSource:
    return FakeSource(sample_records)


@pytest.fixture()
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def corpus(fake_source, fake_clock) -> CorpusCache:
    return CorpusCache(fake_source, ttl_seconds=300, clock=fake_clock)


@pytest.fixture()
def null_oracle(lexicon):
    adapter = OracleAdapter(NullOracleBackend(), ready_timeout=0.5, answer_timeout=0.5, lexicon=lexicon)
    yield adapter
    adapter.shutdown()


@pytest.fixture()
def assistant(corpus, null_oracle, lexicon) -> VetCareAssistant:
    return VetCareAssistant(corpus, oracle=null_oracle, lexicon=lexicon)


@pytest.fixture()
def records_file(tmp_path):
    path = tmp_path / "diseases.json"
    path.write_text(json.dumps(SAMPLE_DOCUMENTS, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture()
def app_client(monkeypatch, records_file, lexicon):
    if "app" in sys.modules:
        del sys.modules["app"]
    app_module = importlib.import_module("app")
    app_module.app.config["TESTING"] = True

    store = RecordStore(str(records_file))
    oracle = OracleAdapter(NullOracleBackend(), ready_timeout=0.5, answer_timeout=0.5, lexicon=lexicon)
    monkeypatch.setattr(app_module, "record_store", store)
    monkeypatch.setattr(app_module, "assistant", VetCareAssistant(CorpusCache(store), oracle=oracle, lexicon=lexicon))

    with app_module.app.test_client() as client:
        yield app_module, client

    oracle.shutdown()
