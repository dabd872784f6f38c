"""MongoDB store for backup records."""

import pymongo
from pymongo import MongoClient
from bson.errors import InvalidDocument
from pymongo.errors import PyMongoError

from .errors import RecordInsertError, StoreConnectError, StoreDisconnectError
from .models import BackupRecord

# Seconds
MONGO_CONN_TIMEOUT = 60
MONGO_DISCONNECT_TIMEOUT = 60


def connect(uri: str) -> MongoClient:
    """Open a client and make sure the server answers within MONGO_CONN_TIMEOUT."""
    try:
        client = MongoClient(
            uri,
            serverSelectionTimeoutMS=MONGO_CONN_TIMEOUT * 1000,
            connectTimeoutMS=MONGO_CONN_TIMEOUT * 1000,
        )
    except (PyMongoError, ValueError) as e:
        raise StoreConnectError(f"Error creating mongo client({uri}): {e}") from e

    try:
        with pymongo.timeout(MONGO_CONN_TIMEOUT):
            client.admin.command("ping")
    except PyMongoError as e:
        client.close()
        raise StoreConnectError(f"Error connecting to mongo({uri}): {e}") from e
    return client


def disconnect(client: MongoClient) -> None:
    try:
        with pymongo.timeout(MONGO_DISCONNECT_TIMEOUT):
            client.close()
    except PyMongoError as e:
        raise StoreDisconnectError(f"Error disconnecting from mongo: {e}") from e


def get_collection(client: MongoClient, db_name: str, coll_name: str):
    return client[db_name][coll_name]


def insert_backup_record(collection, record: BackupRecord):
    """Insert one backup record and return its id.

    Always a plain insert: running the stage twice stores two records.
    """
    try:
        result = collection.insert_one(record.to_document())
    except (PyMongoError, InvalidDocument, OverflowError) as e:
        raise RecordInsertError(
            f"Error recording backups ({record.aid}, {record.year}, {record.month}, "
            f"{[b.url for b in record.backups]}) in mongo: {e}"
        ) from e
    return result.inserted_id
