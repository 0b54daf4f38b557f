"""
Database Module
File-based storage: db/settings.json holds layout settings edited from the frontend.
Uses orjson for faster JSON parsing.
"""

from pathlib import Path

import aiofiles
import orjson
from loguru import logger

from layout.constants import (
    DEFAULT_DEBOUNCE_MS,
    DEFAULT_NODE_H,
    DEFAULT_NODE_SEP,
    DEFAULT_NODE_W,
    DEFAULT_RANK_SEP,
    DEFAULT_RANKDIR,
    RANKDIRS,
)

DB_DIR = Path(__file__).parent
SETTINGS_FILE = "settings.json"

DEFAULT_LAYOUT_SETTINGS = {
    "nodeWidth": DEFAULT_NODE_W,
    "nodeHeight": DEFAULT_NODE_H,
    "nodeSep": DEFAULT_NODE_SEP,
    "rankSep": DEFAULT_RANK_SEP,
    "rankdir": DEFAULT_RANKDIR,
    "debounceMs": DEFAULT_DEBOUNCE_MS,
}


async def get_settings() -> dict:
    """Get full settings from db/settings.json. Missing or corrupt file -> {}."""
    file_path = DB_DIR / SETTINGS_FILE
    try:
        async with aiofiles.open(file_path, "rb") as f:
            data = await f.read()
            settings = orjson.loads(data)
    except FileNotFoundError:
        return {}
    except orjson.JSONDecodeError as e:
        logger.warning("Invalid JSON in {}: {}", file_path, e)
        return {}
    return settings if isinstance(settings, dict) else {}


async def save_settings(settings: dict) -> dict:
    """Save settings to db/settings.json. Atomic write to avoid corruption."""
    DB_DIR.mkdir(parents=True, exist_ok=True)
    file_path = DB_DIR / SETTINGS_FILE
    tmp_path = file_path.with_suffix(file_path.suffix + ".tmp")
    content = orjson.dumps(settings or {}, option=orjson.OPT_INDENT_2).decode("utf-8")
    async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
        await f.write(content)
    tmp_path.replace(file_path)
    return {"success": True}


def resolve_layout_settings(raw: dict) -> dict:
    """Merge stored "layout" section over defaults; invalid values fall back to defaults."""
    stored = (raw or {}).get("layout") or {}
    if not isinstance(stored, dict):
        stored = {}
    cfg = dict(DEFAULT_LAYOUT_SETTINGS)
    for k in ("nodeWidth", "nodeHeight", "nodeSep", "rankSep"):
        v = stored.get(k)
        try:
            if v is not None and float(v) >= 0:
                cfg[k] = float(v)
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid layout setting {}={!r}", k, v)
    v = stored.get("debounceMs")
    try:
        if v is not None and int(v) >= 0:
            cfg["debounceMs"] = int(v)
    except (TypeError, ValueError):
        logger.warning("Ignoring invalid layout setting debounceMs={!r}", v)
    if stored.get("rankdir") in RANKDIRS:
        cfg["rankdir"] = stored["rankdir"]
    return cfg


async def get_layout_settings() -> dict:
    """Effective layout settings (stored values over defaults)."""
    raw = await get_settings()
    return resolve_layout_settings(raw)
