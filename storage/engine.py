from __future__ import annotations
import logging
import os
from typing import Protocol, Optional, List, Dict, Any, Callable

from models.actor import Actor
from models.scene import Scene
from . import files
from .merge import apply_update
from .schemas import ACTOR_SCHEMA, SCENE_SCHEMA, TYPED_ACTOR_SCHEMA, TYPED_SCENE_SCHEMA, validate

logger = logging.getLogger('storage')


class StorageError(Exception):
    pass


class RecordNotFound(StorageError):
    pass


class SchemaViolation(StorageError):
    def __init__(self, record_id: str, errors: List[str]):
        self.record_id = record_id
        self.errors = errors
        super().__init__(f"{record_id}: " + "; ".join(errors))


class RecordStore(Protocol):
    async def list_actors(self) -> List[Actor]: ...
    async def list_scenes(self) -> List[Scene]: ...
    async def update_actor(self, actor_id: str, update_data: Dict[str, Any], enforce_types: bool = True) -> Actor: ...
    async def update_scene(self, scene_id: str, update_data: Dict[str, Any], enforce_types: bool = True) -> Scene: ...


class _Collection:
    def __init__(self, folder: str, kind: str, schema: dict, typed_schema: dict, factory: Callable[[dict], Any]):
        self.folder = folder
        self.kind = kind
        self.schema = schema
        self.typed_schema = typed_schema
        self.factory = factory
        self._paths: Dict[str, str] = {}

    async def load_all(self) -> list:
        out = []
        for path in await files.async_list_json_files(self.folder):
            raw = await files.async_load_json(path)
            if not isinstance(raw, dict):
                logger.warning('Skipping unreadable %s file %s', self.kind, path)
                continue
            raw.setdefault('_id', os.path.basename(path)[:-5])
            errors = validate(self.schema, raw)
            if errors:
                logger.warning('Skipping invalid %s file %s: %s', self.kind, path, '; '.join(errors))
                continue
            self._paths[str(raw['_id'])] = path
            out.append(self.factory(raw))
        return out

    async def update(self, record_id: str, update_data: Dict[str, Any], enforce_types: bool):
        path = self._paths.get(record_id) or files.record_path(self.folder, record_id)
        raw = await files.async_load_json(path)
        if raw is None:
            raise RecordNotFound(f"{self.kind} {record_id} not found")
        merged = apply_update(raw, update_data)
        if enforce_types:
            errors = validate(self.typed_schema, merged)
            if errors:
                raise SchemaViolation(record_id, errors)
        await files.async_save_json(path, merged)
        return self.factory(merged)


class JsonWorldStore(RecordStore):
    """World records as one JSON file per document.

    Layout: <world>/actors/<id>.json and <world>/scenes/<id>.json
    """
    def __init__(self, world_dir: str):
        self.world_dir = world_dir
        self.actors = _Collection(os.path.join(world_dir, 'actors'), 'actor',
                                  ACTOR_SCHEMA, TYPED_ACTOR_SCHEMA, Actor.from_dict)
        self.scenes = _Collection(os.path.join(world_dir, 'scenes'), 'scene',
                                  SCENE_SCHEMA, TYPED_SCENE_SCHEMA, Scene.from_dict)

    async def list_actors(self) -> List[Actor]:
        return await self.actors.load_all()

    async def list_scenes(self) -> List[Scene]:
        return await self.scenes.load_all()

    async def update_actor(self, actor_id: str, update_data: Dict[str, Any], enforce_types: bool = True) -> Actor:
        return await self.actors.update(actor_id, update_data, enforce_types)

    async def update_scene(self, scene_id: str, update_data: Dict[str, Any], enforce_types: bool = True) -> Scene:
        return await self.scenes.update(scene_id, update_data, enforce_types)

# Simple registry / factory
_default_engine: Optional[RecordStore] = None

async def get_engine(world_dir: Optional[str] = None) -> RecordStore:
    global _default_engine
    if world_dir is not None:
        return JsonWorldStore(world_dir)
    if _default_engine is None:
        from core.config import WORLD_FOLDER
        _default_engine = JsonWorldStore(WORLD_FOLDER)
    return _default_engine

__all__ = [
    "RecordStore",
    "JsonWorldStore",
    "StorageError",
    "RecordNotFound",
    "SchemaViolation",
    "get_engine",
]
