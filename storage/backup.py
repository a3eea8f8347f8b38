from __future__ import annotations
import logging
import os
import zipfile
from datetime import datetime, timezone
from typing import Optional, Tuple

logger = logging.getLogger('storage')


def _timestamp() -> str:
    # Use UTC to avoid TZ ambiguity
    return datetime.now(timezone.utc).strftime('%Y%m%dT%H%M%SZ')


def _should_include(file_path: str) -> bool:
    name = os.path.basename(file_path)
    return name.lower().endswith('.json') and not name.startswith('.tmp_')


def create_backup(world_dir: str, label: Optional[str] = None) -> Tuple[str, int]:
    """Zip every JSON record under `world_dir` into `world_dir`/backups.

    Returns (zip_path, file_count).
    """
    backups_dir = os.path.join(world_dir, 'backups')
    os.makedirs(backups_dir, exist_ok=True)
    suffix = f"_{label}" if label else ""
    zip_path = os.path.join(backups_dir, f"world_backup_{_timestamp()}{suffix}.zip")

    count = 0
    with zipfile.ZipFile(zip_path, 'w', compression=zipfile.ZIP_DEFLATED) as zf:
        for root, dirs, names in os.walk(world_dir):
            # Skip the backups directory itself
            if os.path.normpath(root).startswith(os.path.normpath(backups_dir)):
                continue
            for fname in sorted(names):
                fpath = os.path.join(root, fname)
                if not _should_include(fpath):
                    continue
                zf.write(fpath, arcname=os.path.relpath(fpath, world_dir))
                count += 1
    logger.info('Backed up %d record file(s) to %s', count, zip_path)
    return zip_path, count
