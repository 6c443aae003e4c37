"""Per-user persistence of the whole session record."""

import json
import logging
import sqlite3

from pydantic import ValidationError

from errors import PersistenceDecodeError
from models import SessionRecord

from .base import KeyValueStore
from .migrations import recover_interrupted, upgrade_record

logger = logging.getLogger(__name__)

KEY_PREFIX = "lingosphere-app-data-"


def record_key(user_id: str) -> str:
    """Storage key for a user's record. Users are identified by email."""
    return f"{KEY_PREFIX}{user_id}"


class SessionStore:
    """Save and restore session records over a key-value store.

    A saved record is a value copy; nothing keeps a live reference to it.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    def save(self, user_id: str, record: SessionRecord) -> None:
        """Replace the stored record for a user.

        In privacy mode nothing is written, and any record already stored for
        the user is removed so no trace of the session remains.

        A storage failure is logged and the session carries on unsaved.
        """
        key = record_key(user_id)
        try:
            if record.settings.is_incognito:
                self.store.delete(key)
            else:
                self.store.set(key, record.model_dump_json())
        except sqlite3.Error:
            logger.exception("Failed to save session record for %s", user_id)

    def load(self, user_id: str) -> SessionRecord | None:
        """Restore a user's record.

        Returns:
            The record, or None when nothing usable is stored. Corrupt records
            and records saved in privacy mode are deleted.
        """
        key = record_key(user_id)
        raw = self.store.get(key)
        if raw is None:
            return None

        try:
            record = self._decode(raw)
        except PersistenceDecodeError as e:
            logger.warning("Discarding unreadable session record for %s: %s", user_id, e)
            self.store.delete(key)
            return None

        if record.settings.is_incognito:
            logger.info("Removing session record saved in privacy mode for %s", user_id)
            self.store.delete(key)
            return None
        return record

    def clear(self, user_id: str) -> None:
        self.store.delete(record_key(user_id))

    def _decode(self, raw: str) -> SessionRecord:
        try:
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise PersistenceDecodeError("record is not a JSON object")
            return recover_interrupted(SessionRecord.model_validate(upgrade_record(data)))
        except (ValueError, ValidationError) as e:
            raise PersistenceDecodeError(str(e)) from e
