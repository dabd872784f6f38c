"""Shared fixtures: a fake MongoDB server and a ready-made stage config."""

from types import SimpleNamespace

import bson
import pytest

from backup_stage import db
from backup_stage.models import StageConfig

# ---------------------------------------------------------------------------
# Fake MongoDB
# ---------------------------------------------------------------------------


class FakeCollection:
    def __init__(self):
        self.documents: list[dict] = []
        self.insert_error: Exception | None = None

    def insert_one(self, document: dict):
        if self.insert_error is not None:
            raise self.insert_error
        # Fails the same way a real server round trip would on unencodable values
        bson.encode(document)
        stored = dict(document, _id=len(self.documents) + 1)
        self.documents.append(stored)
        return SimpleNamespace(inserted_id=stored["_id"])


class FakeServer:
    """State shared by every client opened against it."""

    def __init__(self):
        self.collections: dict[tuple[str, str], FakeCollection] = {}
        self.clients: list["FakeMongoClient"] = []
        self.ping_error: Exception | None = None
        self.close_error: Exception | None = None
        self.on_close = None

    def collection(self, db_name: str, coll_name: str) -> FakeCollection:
        return self.collections.setdefault((db_name, coll_name), FakeCollection())

    def client(self, uri: str, **kwargs) -> "FakeMongoClient":
        client = FakeMongoClient(self, uri, kwargs)
        self.clients.append(client)
        return client


class FakeMongoClient:
    def __init__(self, server: FakeServer, uri: str, options: dict):
        self.server = server
        self.uri = uri
        self.options = options
        self.close_calls = 0
        self.admin = SimpleNamespace(command=self._command)

    def _command(self, name: str) -> dict:
        if self.server.ping_error is not None:
            raise self.server.ping_error
        return {"ok": 1.0}

    def __getitem__(self, db_name: str):
        server = self.server

        class _Database:
            def __getitem__(self, coll_name: str) -> FakeCollection:
                return server.collection(db_name, coll_name)

        return _Database()

    def close(self) -> None:
        self.close_calls += 1
        if self.server.on_close is not None:
            self.server.on_close()
        if self.server.close_error is not None:
            raise self.server.close_error


@pytest.fixture
def mongo(monkeypatch) -> FakeServer:
    server = FakeServer()
    monkeypatch.setattr(db, "MongoClient", server.client)
    return server


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

ENV = {
    "MONTH": "8",
    "YEAR": "2021",
    "AID": "TRT1",
    "MONGODB_URI": "mongodb://localhost:27017",
    "MONGODB_DBNAME": "dadosjusbr",
    "MONGODB_BCOLL": "backups",
    "ACCESS_KEY_ID": "test-access-key",
    "SECRET_ACCESS_KEY": "test-secret-key",
    "BUCKET_NAME": "test-bucket",
}


@pytest.fixture
def config() -> StageConfig:
    return StageConfig(
        month=8,
        year=2021,
        aid="trt1",
        mongo_uri=ENV["MONGODB_URI"],
        mongo_db_name=ENV["MONGODB_DBNAME"],
        mongo_backup_coll=ENV["MONGODB_BCOLL"],
        access_key_id=ENV["ACCESS_KEY_ID"],
        secret_access_key=ENV["SECRET_ACCESS_KEY"],
        bucket_name=ENV["BUCKET_NAME"],
    )


@pytest.fixture
def env() -> dict[str, str]:
    return dict(ENV)
