"""World migration runner.

Walks every actor and scene in the record store, builds a payload per
record with the transforms in ``modules.transforms`` and writes the
non-empty ones back one at a time. A failing record is logged and reported,
never raised: the run always finishes and always records the new version.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Mapping, Optional

from core.hooks import HOOKS, HookRegistry
from core.notify import Notifier, notify
from core.settings import MIGRATION_SETTING, SettingsStore
from models.update import Payload, is_empty, prune, to_update_data
from modules.data_constants import SYSTEM_ID
from modules.transforms import migrate_actor, migrate_scene_data, migrate_token_link
from storage.engine import RecordStore
from utils.coercion import parse_int

logger = logging.getLogger('migration')

APPLIED = 'applied'
NOOP = 'noop'
FAILED = 'failed'

LINKED_ACTOR_TYPES = ('character', 'crew')


@dataclass
class RecordOutcome:
    kind: str        # 'actor' | 'scene'
    record_id: str
    name: str
    step: str        # 'attributes' | 'token-link' | 'scene' | 'list'
    status: str
    error: Optional[str] = None


@dataclass
class MigrationReport:
    version: str
    outcomes: List[RecordOutcome] = field(default_factory=list)
    version_saved: bool = False

    def _with(self, status: str) -> List[RecordOutcome]:
        return [o for o in self.outcomes if o.status == status]

    @property
    def applied(self) -> List[RecordOutcome]:
        return self._with(APPLIED)

    @property
    def skipped(self) -> List[RecordOutcome]:
        return self._with(NOOP)

    @property
    def failed(self) -> List[RecordOutcome]:
        return self._with(FAILED)

    @property
    def ok(self) -> bool:
        return not self.failed and self.version_saved

    def summary(self) -> str:
        return (f"{len(self.applied)} updated, {len(self.skipped)} unchanged, "
                f"{len(self.failed)} failed")


def _version_parts(version: Any) -> tuple:
    parts = []
    for piece in str(version).split('.'):
        result = parse_int(piece)
        parts.append(result.value if result.ok else 0)
    while parts and parts[-1] == 0:
        parts.pop()
    return tuple(parts)


def needs_migration(settings: SettingsStore, version: str) -> bool:
    """True when the world was last migrated before `version`.

    Worlds that never migrated still hold the registered default ([0]),
    which counts as older than anything.
    """
    current = settings.get(SYSTEM_ID, MIGRATION_SETTING)
    if not isinstance(current, str) or not current.strip():
        return True
    return _version_parts(current) < _version_parts(version)


async def _migrate_record(report: MigrationReport, kind: str, record, step: str,
                          build: Callable[[], Payload], update) -> None:
    try:
        payload = prune(build(), record.source)
        if is_empty(payload):
            report.outcomes.append(RecordOutcome(kind, record.id, record.name, step, NOOP))
            return
        logger.info('Migrating %s %s (%s) for %s', kind, record.name, record.id, step)
        await update(record.id, to_update_data(payload), enforce_types=False)
    except Exception as e:
        logger.exception('Failed migrating %s %s (%s) for %s', kind, record.name, record.id, step)
        report.outcomes.append(RecordOutcome(kind, record.id, record.name, step, FAILED,
                                             error=f'{e.__class__.__name__}: {e}'))
        return
    report.outcomes.append(RecordOutcome(kind, record.id, record.name, step, APPLIED))


async def _list(report: MigrationReport, kind: str, lister) -> list:
    try:
        return await lister()
    except Exception as e:
        logger.exception('Could not list %ss', kind)
        report.outcomes.append(RecordOutcome(kind, '*', '*', 'list', FAILED,
                                             error=f'{e.__class__.__name__}: {e}'))
        return []


async def migrate_world(store: RecordStore, settings: SettingsStore, notifier: Notifier, version: str,
                        attributes: Optional[Mapping[str, Any]] = None,
                        hooks: Optional[HookRegistry] = None) -> MigrationReport:
    """Migrate every actor and scene of the world to `version`."""
    hooks = hooks or HOOKS
    report = MigrationReport(version=version)
    await notify(notifier, f"Applying RITS Actors migration for version {version}. "
                           f"Please be patient and do not close your game or shut down your server.",
                 permanent=True)
    await hooks.emit('migration.started', version)

    for actor in await _list(report, 'actor', store.list_actors):
        if actor.type == 'character':
            await _migrate_record(report, 'actor', actor, 'attributes',
                                  lambda: migrate_actor(actor, attributes), store.update_actor)
        if actor.type in LINKED_ACTOR_TYPES:
            await _migrate_record(report, 'actor', actor, 'token-link',
                                  lambda: migrate_token_link(actor), store.update_actor)

    for scene in await _list(report, 'scene', store.list_scenes):
        await _migrate_record(report, 'scene', scene, 'scene',
                              lambda: migrate_scene_data(scene), store.update_scene)

    # Recorded even when records failed; there is no rollback.
    try:
        await settings.set(SYSTEM_ID, MIGRATION_SETTING, version)
        report.version_saved = True
    except Exception:
        logger.exception('Could not store migration version %s', version)

    if report.failed:
        logger.warning('Migration to %s finished with failures: %s', version, report.summary())
    else:
        logger.info('Migration to %s finished: %s', version, report.summary())
    await notify(notifier, f"RITS System Migration to version {version} completed!", permanent=True)
    await hooks.emit('migration.completed', report)
    return report

__all__ = ["migrate_world", "needs_migration", "MigrationReport", "RecordOutcome", "APPLIED", "NOOP", "FAILED"]
