"""Tone and length preferences."""

from pydantic import ValidationError

from smartreplies.core.logging import get_logger
from smartreplies.extension.models import Preferences
from smartreplies.extension.storage import KeyValueStore

logger = get_logger(__name__)

PREFERENCES_KEY = "aiSmartRepliesPrefs"


class PreferenceStore:
    """Loads and saves Preferences, falling back to defaults."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    async def load(self) -> Preferences:
        raw = await self._store.get(PREFERENCES_KEY)
        if raw is None:
            return Preferences()
        try:
            return Preferences.model_validate(raw)
        except ValidationError as e:
            logger.warning("Stored preferences invalid, using defaults", error=str(e))
            return Preferences()

    async def save(self, preferences: Preferences) -> None:
        await self._store.set(PREFERENCES_KEY, preferences.model_dump(by_alias=True, mode="json"))
        logger.info(
            "Preferences saved",
            tone=preferences.tone,
            reply_length=preferences.reply_length,
        )
