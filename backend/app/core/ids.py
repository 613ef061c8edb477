"""Id, name and timestamp helpers shared by chats and messages.

Records are keyed by ``owner/name``. Timestamps are ISO-8601 strings in UTC
with millisecond precision, so lexicographic order equals creation order.
"""

import secrets
import string
from datetime import datetime, timedelta, timezone

_NAME_ALPHABET = string.ascii_lowercase + string.digits
_RANDOM_NAME_LENGTH = 6


def get_id(owner: str, name: str) -> str:
    return f"{owner}/{name}"


def split_id(record_id: str) -> tuple[str, str]:
    """Split ``owner/name`` into its parts. Raises ValueError when malformed."""
    owner, sep, name = record_id.partition("/")
    if not sep or not owner or not name or "/" in name:
        raise ValueError(f"Invalid id: {record_id!r}, expected 'owner/name'")
    return owner, name


def random_name() -> str:
    return "".join(secrets.choice(_NAME_ALPHABET) for _ in range(_RANDOM_NAME_LENGTH))


def format_time(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds")


def current_time() -> str:
    return format_time(datetime.now(timezone.utc))


def time_after(timestamp: str) -> str:
    """Timestamp one millisecond after ``timestamp``."""
    moment = datetime.fromisoformat(timestamp)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return format_time(moment + timedelta(milliseconds=1))
