#
# src/testdeck/telemetry/logger/processors.py
#
"""
Custom structlog processors.
"""

import logging
from typing import Any

from structlog.typing import EventDict, WrappedLogger

LOG_EMOJIS: dict[int | str, str] = {
    logging.DEBUG: "🐛",
    logging.INFO: "ℹ️",
    logging.WARNING: "⚠️",
    logging.ERROR: "❌",
    logging.CRITICAL: "💥",
    "run": "🧪",
    "scan": "🔎",
    "watch": "👀",
    "general": "➡️",
}

# Keys that only matter to in-process bookkeeping and should never be rendered.
_EXTRA_KEYS = ("_record", "_from_structlog")


def add_emoji_processor(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Prefix the event with an emoji chosen by explicit ``emoji_key`` or level."""
    emoji_key: Any = event_dict.pop("emoji_key", None)
    if emoji_key is not None and emoji_key in LOG_EMOJIS:
        emoji = LOG_EMOJIS[emoji_key]
    else:
        level = logging.getLevelName(method_name.upper())
        emoji = LOG_EMOJIS.get(level, LOG_EMOJIS["general"]) if isinstance(level, int) else LOG_EMOJIS["general"]
    event = event_dict.get("event")
    if isinstance(event, str):
        event_dict["event"] = f"{emoji} {event}"
    return event_dict


def remove_extra_keys_processor(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    for key in _EXTRA_KEYS:
        event_dict.pop(key, None)
    return event_dict


# 🔼⚙️
