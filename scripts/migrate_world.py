"""One-shot world migration for the RITS system.

Run: python scripts/migrate_world.py [--world DIR] [--version X.Y.Z] [--force] [--no-backup] [--json] [--strict]

Steps:
1. Back up every JSON record of the world (unless --no-backup).
2. Skip if the world is already at --version (unless --force).
3. Rename attributes/skills, coerce numeric fields, link tokens on actors and scenes.
4. Store the new migration version in the world settings.

Outputs a summary; with --json emits the per-record outcomes as JSON.
Exit code: 0 unless --strict given and any record failed.
"""
from __future__ import annotations
import argparse
import asyncio
import json
import logging
import os
import sys
from dataclasses import asdict
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from core import config  # noqa: E402  # type: ignore
from core.notify import LoggingNotifier  # noqa: E402  # type: ignore
from core.settings import SettingsStore, register_system_settings  # noqa: E402  # type: ignore
from modules.migration import migrate_world, needs_migration  # noqa: E402  # type: ignore
from storage.backup import create_backup  # noqa: E402  # type: ignore
from storage.engine import get_engine  # noqa: E402  # type: ignore

logger = logging.getLogger('migration')


async def run(world: str, version: str, force: bool, backup: bool):
    settings = SettingsStore(os.path.join(world, 'settings.json'))
    register_system_settings(settings)
    await settings.load()
    if not force and not needs_migration(settings, version):
        logger.info('World %s is already at %s; nothing to do', world, version)
        return None
    if backup:
        path, count = create_backup(world, version)
        logger.info('Backup created: %s (%d files)', path, count)
    store = await get_engine(world)
    return await migrate_world(store, settings, LoggingNotifier('migration'), version)


def main(argv=None):
    ap = argparse.ArgumentParser(description='RITS world migration')
    ap.add_argument('--world', default=config.WORLD_FOLDER, help='World folder (actors/, scenes/, settings.json)')
    ap.add_argument('--version', default=config.SYSTEM_VERSION, help='Target migration version')
    ap.add_argument('--force', action='store_true', help='Migrate even if the world is already at --version')
    ap.add_argument('--no-backup', action='store_true', help='Skip the pre-migration backup')
    ap.add_argument('--json', action='store_true', help='Emit JSON instead of text summary')
    ap.add_argument('--strict', action='store_true', help='Exit non-zero when any record failed')
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format='[%(levelname)s] %(name)s: %(message)s')
    report = asyncio.run(run(args.world, args.version, args.force, not args.no_backup))
    if report is None:
        print(f'World already migrated to {args.version}.')
        sys.exit(0)
    if args.json:
        print(json.dumps(asdict(report), indent=2))
    else:
        print(f'Migration to {report.version}: {report.summary()}')
        for o in report.failed:
            print(f'  - {o.kind} {o.name} ({o.record_id}) [{o.step}]: {o.error}')
    if args.strict and not report.ok:
        sys.exit(1)
    sys.exit(0)


if __name__ == '__main__':
    main()
