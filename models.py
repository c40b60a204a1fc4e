# models.py
import threading
import time
from datetime import datetime

import pytz

# Fields a client is allowed to change after creation
MUTABLE_FIELDS = ("text", "completed")

_id_lock = threading.Lock()
_last_id = 0


def next_id(floor: int = 0) -> int:
    """Millisecond timestamp, bumped past the last issued id (and `floor`) so two
    creates in the same millisecond never share an id."""
    global _last_id
    with _id_lock:
        candidate = int(time.time() * 1000)
        candidate = max(candidate, _last_id + 1, floor + 1)
        _last_id = candidate
        return candidate


def iso_now() -> str:
    # Same shape as JavaScript's Date.toISOString(): 2024-01-31T09:15:02.123Z
    now = datetime.now(pytz.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def new_todo(text: str, floor: int = 0) -> dict:
    return {
        "id": next_id(floor),
        "text": text,
        "completed": False,
        "createdAt": iso_now(),
    }


def merge_fields(todo: dict, fields: dict) -> dict:
    """Last write wins per field; id and createdAt are never overwritten."""
    updated = dict(todo)
    for key in MUTABLE_FIELDS:
        if key in fields:
            updated[key] = fields[key]
    return updated
