from __future__ import annotations
import copy
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional

# Field names the host uses on disk. Anything else is carried through in `extra`.
_SKILL_FIELDS = ("label", "value")
_ATTRIBUTE_FIELDS = ("label", "skills")
_SYSTEM_FIELDS = ("attributes", "healing-clock")
_ACTOR_FIELDS = ("_id", "name", "type", "system", "effects", "prototypeToken")


def _extra(data: Dict[str, Any], known) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if k not in known}


@dataclass
class Skill:
    label: Optional[str] = None
    value: Any = None  # int once migrated, legacy worlds store strings
    extra: Dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Skill":
        return Skill(label=data.get("label"), value=data.get("value"), extra=_extra(data, _SKILL_FIELDS))

    def to_dict(self) -> Dict[str, Any]:
        out = dict(self.extra)
        out["label"] = self.label
        out["value"] = self.value
        return out


@dataclass
class Attribute:
    label: Optional[str] = None
    skills: Dict[str, Skill] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Attribute":
        return Attribute(
            label=data.get("label"),
            skills={k: Skill.from_dict(v or {}) for k, v in (data.get("skills") or {}).items()},
            extra=_extra(data, _ATTRIBUTE_FIELDS),
        )

    def to_dict(self) -> Dict[str, Any]:
        out = dict(self.extra)
        out["label"] = self.label
        out["skills"] = {k: s.to_dict() for k, s in self.skills.items()}
        return out


@dataclass
class ActorSystem:
    attributes: Dict[str, Attribute] = field(default_factory=dict)
    healing_clock: Any = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "ActorSystem":
        return ActorSystem(
            attributes={k: Attribute.from_dict(v or {}) for k, v in (data.get("attributes") or {}).items()},
            healing_clock=data.get("healing-clock"),
            extra=_extra(data, _SYSTEM_FIELDS),
        )

    def to_dict(self) -> Dict[str, Any]:
        out = dict(self.extra)
        out["attributes"] = {k: a.to_dict() for k, a in self.attributes.items()}
        out["healing-clock"] = self.healing_clock
        return out


@dataclass
class Change:
    key: str
    mode: int = 0
    value: Any = None

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Change":
        return Change(key=str(data.get("key", "")), mode=data.get("mode", 0), value=data.get("value"))

    def to_dict(self) -> Dict[str, Any]:
        return {"key": self.key, "mode": self.mode, "value": self.value}


@dataclass
class Effect:
    id: str
    label: Optional[str] = None
    changes: List[Change] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Effect":
        return Effect(
            id=str(data.get("_id", "")),
            label=data.get("label"),
            changes=[Change.from_dict(c) for c in data.get("changes", [])],
            extra=_extra(data, ("_id", "label", "changes")),
        )

    def to_dict(self) -> Dict[str, Any]:
        out = dict(self.extra)
        out.update({"_id": self.id, "label": self.label, "changes": [c.to_dict() for c in self.changes]})
        return out


@dataclass
class PrototypeToken:
    actor_link: bool = False
    extra: Dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "PrototypeToken":
        return PrototypeToken(actor_link=bool(data.get("actorLink", False)), extra=_extra(data, ("actorLink",)))

    def to_dict(self) -> Dict[str, Any]:
        out = dict(self.extra)
        out["actorLink"] = self.actor_link
        return out


@dataclass
class Actor:
    """An actor document as persisted by the world.

    `type` is kept as a plain string: the migration only distinguishes
    'character' and 'crew', every other variant passes through untouched.
    """
    id: str
    name: str = "Unnamed"
    type: str = "character"
    system: ActorSystem = field(default_factory=ActorSystem)
    effects: List[Effect] = field(default_factory=list)
    prototype_token: PrototypeToken = field(default_factory=PrototypeToken)
    extra: Dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Actor":
        return Actor(
            id=str(data.get("_id", "")),
            name=data.get("name", "Unnamed"),
            type=data.get("type", "character"),
            system=ActorSystem.from_dict(data.get("system") or {}),
            effects=[Effect.from_dict(e) for e in data.get("effects", [])],
            prototype_token=PrototypeToken.from_dict(data.get("prototypeToken") or {}),
            extra=_extra(data, _ACTOR_FIELDS),
        )

    def to_dict(self) -> Dict[str, Any]:
        out = dict(self.extra)
        out.update({
            "_id": self.id,
            "name": self.name,
            "type": self.type,
            "system": self.system.to_dict(),
            "effects": [e.to_dict() for e in self.effects],
            "prototypeToken": self.prototype_token.to_dict(),
        })
        return out

    @property
    def source(self) -> Dict[str, Any]:
        """Fresh plain-data copy of the persisted state."""
        return copy.deepcopy(self.to_dict())

__all__ = ["Actor", "ActorSystem", "Attribute", "Skill", "Effect", "Change", "PrototypeToken"]
