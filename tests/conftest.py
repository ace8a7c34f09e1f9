import os
import random

import pytest
from fastapi.testclient import TestClient

from vocabtrainer.app import create_app
from vocabtrainer.config import settings
from vocabtrainer.controller import Trainer
from vocabtrainer.database import init_db
from vocabtrainer.engine import SessionEngine
from vocabtrainer.storage import ConfigStore, KeyValueStore, ProgressStore
from vocabtrainer.vocabulary import load

WORDS = [
    ("1", "dog", "犬"),
    ("2", "cat", "猫"),
    ("3", "tree", "木"),
    ("4", "house", "家"),
    ("5", "water", "水"),
]

CSV_TEXT = "ID,English,Japanese\n" + "".join(f"{i},{p},{t}\n" for i, p, t in WORDS)


@pytest.fixture
def records():
    return [{"id": i, "prompt": p, "target": t} for i, p, t in WORDS]


@pytest.fixture
def pool(records):
    return load(records)


@pytest.fixture
def engine():
    return SessionEngine(random.Random(1234))


@pytest.fixture
def db_path(tmp_path):
    path = os.path.join(str(tmp_path), "db", "test.db")
    init_db(path)
    return path


@pytest.fixture
def kv(db_path):
    return KeyValueStore(db_path)


@pytest.fixture
def make_trainer(records, kv, engine):
    def _make():
        return Trainer(records, ProgressStore(kv), ConfigStore(kv), engine=engine)

    return _make


@pytest.fixture
def app_settings(tmp_path, monkeypatch):
    words_file = tmp_path / "words.csv"
    words_file.write_text(CSV_TEXT, encoding="utf-8")
    monkeypatch.setattr(settings, "LOG_DIR", str(tmp_path / "log"))
    monkeypatch.setattr(settings, "DB_DIR", str(tmp_path / "db"))
    monkeypatch.setattr(settings, "WORDS_FILE", str(words_file))
    monkeypatch.setattr(settings, "LOG_TO_DB", False)
    return monkeypatch


@pytest.fixture
def client(app_settings):
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def prefixed_client(app_settings):
    app_settings.setattr(settings, "ROOT_PATH", "/trainer")
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client
