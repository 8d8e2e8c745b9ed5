"""ID generation utilities."""

from nanoid import generate

ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"
ID_LENGTH = 12


def gen_id(prefix: str) -> str:
    return f"{prefix}{generate(ALPHABET, ID_LENGTH)}"


def task_id() -> str:
    return gen_id("tk_")


def user_id() -> str:
    return gen_id("us_")


def message_id() -> str:
    return gen_id("ms_")


def notification_id() -> str:
    return gen_id("nt_")


def upload_id() -> str:
    return gen_id("up_")


def record_id() -> str:
    return gen_id("rc_")


_COLLECTION_IDS = {
    "tasks": task_id,
    "users": user_id,
    "messages": message_id,
    "notifications": notification_id,
}


def id_for(collection: str) -> str:
    """Fresh id for a record in *collection*, prefixed by entity type."""
    return _COLLECTION_IDS.get(collection, record_id)()
