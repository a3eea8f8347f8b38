"""Record builders and in-memory fakes shared by the tests."""

import copy
from typing import Any

from models.actor import Actor
from models.scene import Scene
from storage.merge import apply_update


def make_legacy_character(_id: str = "a1", name: str = "Vex") -> dict[str, Any]:
    """A character saved before the attribute/skill rename."""
    return {
        "_id": _id,
        "name": name,
        "type": "character",
        "system": {
            "attributes": {
                "insight": {
                    "label": "BITD.Insight",
                    "skills": {
                        "hunt": {"label": "BITD.SkillsHunt", "value": "1"},
                        "study": {"label": "BITD.SkillsStudy", "value": "0"},
                        "tinker": {"label": "BITD.SkillsTinker", "value": "5"},
                    },
                },
                "prowess": {
                    "label": "BITD.Prowess",
                    "skills": {
                        "finesse": {"label": "BITD.SkillsFinesse", "value": 2},
                        "skirmish": {"label": "BITD.SkillsSkirmish", "value": "abc"},
                    },
                },
                "willpower": {
                    "label": "old willpower label",
                    "skills": {
                        "sway": {"label": "BITD.SkillsSway", "value": "3"},
                        "attune": {"label": "BITD.SkillsAttune", "value": "1"},
                    },
                },
            },
            "healing-clock": "2",
            "stress": 4,
        },
        "effects": [
            {
                "_id": "e1",
                "label": "Trained",
                "changes": [
                    {"key": "system.attributes.insight.skills.hunt.value", "mode": 2, "value": "1"},
                    {"key": "system.stress", "mode": 5, "value": 0},
                ],
            },
        ],
        "prototypeToken": {"actorLink": False, "name": name},
    }


def make_scene(_id: str = "s1", tokens: int = 3) -> dict[str, Any]:
    return {
        "_id": _id,
        "name": "Docks",
        "tokens": [
            {
                "_id": f"t{i}",
                "actorId": f"a{i}",
                "actorLink": i % 2 == 0,
                "actorData": {"name": f"Override {i}"} if i % 2 else {},
                "x": 100 * i,
            }
            for i in range(tokens)
        ],
    }


class FakeStore:
    """Record store keeping plain dicts in memory; merges like the JSON store."""

    def __init__(self, actors=(), scenes=(), fail_ids=()):
        self.actors = {a["_id"]: copy.deepcopy(a) for a in actors}
        self.scenes = {s["_id"]: copy.deepcopy(s) for s in scenes}
        self.fail_ids = set(fail_ids)
        self.calls: list[tuple] = []

    async def list_actors(self):
        return [Actor.from_dict(copy.deepcopy(a)) for a in self.actors.values()]

    async def list_scenes(self):
        return [Scene.from_dict(copy.deepcopy(s)) for s in self.scenes.values()]

    async def update_actor(self, actor_id, update_data, enforce_types=True):
        self.calls.append(("actor", actor_id, update_data, enforce_types))
        if actor_id in self.fail_ids:
            raise RuntimeError(f"write rejected for {actor_id}")
        self.actors[actor_id] = apply_update(self.actors[actor_id], update_data)
        return Actor.from_dict(self.actors[actor_id])

    async def update_scene(self, scene_id, update_data, enforce_types=True):
        self.calls.append(("scene", scene_id, update_data, enforce_types))
        if scene_id in self.fail_ids:
            raise RuntimeError(f"write rejected for {scene_id}")
        self.scenes[scene_id] = apply_update(self.scenes[scene_id], update_data)
        return Scene.from_dict(self.scenes[scene_id])


class FakeNotifier:
    def __init__(self):
        self.messages: list[tuple[str, bool]] = []

    async def info(self, message: str, permanent: bool = False) -> None:
        self.messages.append((message, permanent))


