"""Async JSON file helpers for world records and settings.

Blocking file work runs in the default executor. Writes go through a temp
file in the target folder followed by os.replace, so a reader never sees a
half-written record.
"""
import asyncio
import json
import os
import tempfile
from typing import Any, Dict, List, Optional

__all__ = [
    "async_list_json_files",
    "async_load_json",
    "async_save_json",
    "record_path",
]

TMP_PREFIX = ".tmp_"


async def _run_blocking(func, *args):
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, func, *args)


def record_path(folder: str, record_id: str) -> str:
    safe = "".join(c for c in record_id if c.isalnum() or c in ("_", "-", " ")).strip()
    return os.path.join(folder, f"{safe}.json")


def _list_json(folder: str) -> List[str]:
    if not os.path.isdir(folder):
        return []
    names = sorted(n for n in os.listdir(folder) if n.lower().endswith(".json") and not n.startswith(TMP_PREFIX))
    return [os.path.join(folder, n) for n in names]


def _read_json(path: str) -> Optional[Any]:
    if not os.path.exists(path):
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError:
        return None


def _write_json_atomic(path: str, data: Any) -> None:
    folder = os.path.dirname(path) or "."
    os.makedirs(folder, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=folder, prefix=TMP_PREFIX, suffix=".json")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp_path, path)
    except BaseException:
        os.unlink(tmp_path)
        raise


async def async_list_json_files(folder: str) -> List[str]:
    """Paths of the *.json files in `folder`, sorted by name."""
    return await _run_blocking(_list_json, folder)


async def async_load_json(path: str) -> Optional[Any]:
    """Parsed file content, or None when missing or not valid JSON."""
    return await _run_blocking(_read_json, path)


async def async_save_json(path: str, data: Dict[str, Any]) -> None:
    await _run_blocking(_write_json_atomic, path, data)
