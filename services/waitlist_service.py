# services/waitlist_service.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict

from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from config import get_settings_obj
from services.errors import ConflictError, StorageError

DUPLICATE_EMAIL_MESSAGE = "Email already exists"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _iso(ts: datetime) -> str:
    return ts.strftime("%Y-%m-%dT%H:%M:%S.") + f"{ts.microsecond // 1000:03d}Z"


def save_waitlist_submission(db: Database, email: str, fullname: Any, position: Any) -> Dict[str, Any]:
    """
    Store a new submission (deduped on the lowercased email).

    The email is expected to be validated already. Returns the response
    payload for the API, whose created_at is taken after the insert and
    is not the stored timestamp.

    Raises:
        ConflictError if the email is already on the waitlist.
        StorageError on any MongoDB failure.
    """
    email = email.lower()
    collection = db[get_settings_obj().WAITLIST_COLLECTION]

    try:
        if collection.find_one({"email": email}) is not None:
            print(f"[waitlist] duplicate rejected: {email}")
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE)

        result = collection.insert_one({
            "email": email,
            "fullname": fullname,
            "position": position,
            "created_at": _utc_now(),
        })
    except DuplicateKeyError:
        # Lost the race against a concurrent signup; the unique index caught it.
        print(f"[waitlist] duplicate rejected by index: {email}")
        raise ConflictError(DUPLICATE_EMAIL_MESSAGE)
    except PyMongoError as e:
        raise StorageError(str(e)) from e

    print(f"[waitlist] added {email}")
    return {
        "id": str(result.inserted_id),
        "email": email,
        "fullname": fullname,
        "position": position,
        "created_at": _iso(_utc_now()),
    }
