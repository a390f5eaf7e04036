"""In-memory user preference store.

Preferences are created with defaults on first access and updated by merging only
the fields a client sends. Process restart clears everything.
"""

from __future__ import annotations

import itertools
import threading
from datetime import datetime, timezone
from typing import Dict

from toolhub.models.preferences import UserPreferences, UserPreferencesUpdate


class PreferenceStore:
    def __init__(self):
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._by_user: Dict[int, UserPreferences] = {}

    def _create(self, user_id: int) -> UserPreferences:
        now = datetime.now(timezone.utc)
        prefs = UserPreferences(
            id=next(self._ids), user_id=user_id, created_at=now, updated_at=now
        )
        self._by_user[user_id] = prefs
        return prefs

    def get_or_create(self, user_id: int) -> UserPreferences:
        with self._lock:
            return self._by_user.get(user_id) or self._create(user_id)

    def update(self, user_id: int, changes: UserPreferencesUpdate) -> UserPreferences:
        with self._lock:
            current = self._by_user.get(user_id) or self._create(user_id)
            # model_copy does not validate: keep nested models as models and
            # ignore explicit nulls for fields that cannot be empty
            patch = {
                name: getattr(changes, name)
                for name in changes.model_fields_set
                if getattr(changes, name) is not None or name == "last_used_tool"
            }
            patch["updated_at"] = datetime.now(timezone.utc)
            updated = current.model_copy(update=patch)
            self._by_user[user_id] = updated
            return updated
