"""
data/mongo_connection.py
Responsible for handing out the MongoDB database used by the waitlist.

The first call per process opens the client and makes sure the unique
email index exists. Every later call reuses the same handle.
"""

import threading
from typing import Optional

from pymongo import ASCENDING, MongoClient
from pymongo.database import Database
from pymongo.errors import OperationFailure, PyMongoError

from config import get_settings_obj
from services.errors import ConfigurationError, StorageError

# duplicate key, index options conflict, index key specs conflict
INDEX_BUILD_FAILURES = (11000, 85, 86)


class MongoConnection:
    """
    Lazily-initialized, process-wide MongoDB handle.

    The lock makes sure only one client is ever opened, even if two
    requests arrive before the cache is filled.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._client: Optional[MongoClient] = None
        self._db: Optional[Database] = None

    def get(self) -> Database:
        db = self._db
        if db is not None:
            return db

        with self._lock:
            if self._db is None:
                self._open()
            return self._db

    def _open(self) -> None:
        settings = get_settings_obj()
        if not settings.MONGODB_URI:
            raise ConfigurationError("MONGODB_URI is not set")

        client = MongoClient(
            settings.MONGODB_URI,
            serverSelectionTimeoutMS=settings.MONGODB_TIMEOUT_MS,
        )
        try:
            db = client[settings.MONGODB_DB]
            # First round trip: connection problems surface here, not on insert.
            db[settings.WAITLIST_COLLECTION].create_index(
                [("email", ASCENDING)], unique=True, name="email_unique"
            )
        except OperationFailure as e:
            if e.code not in INDEX_BUILD_FAILURES:
                client.close()
                raise StorageError(str(e)) from e
            # Existing data or an older index blocks it; the pre-insert check still applies.
            print(f"[mongo] unique email index not created: {e}")
        except PyMongoError as e:
            client.close()
            raise StorageError(str(e)) from e

        print(f"[mongo] connected to database '{settings.MONGODB_DB}'")
        self._client = client
        self._db = db

    def reset(self) -> None:
        with self._lock:
            if self._client is not None:
                self._client.close()
            self._client = None
            self._db = None


_connection = MongoConnection()


def get_connection() -> Database:
    return _connection.get()


def reset_connection() -> None:
    _connection.reset()
