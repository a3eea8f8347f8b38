from __future__ import annotations
import copy
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional


@dataclass
class Token:
    id: Optional[str] = None
    actor_id: Optional[str] = None
    actor_link: bool = False
    actor_data: Dict[str, Any] = field(default_factory=dict)  # unlinked per-token overrides
    extra: Dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Token":
        return Token(
            id=data.get("_id"),
            actor_id=data.get("actorId"),
            actor_link=bool(data.get("actorLink", False)),
            actor_data=dict(data.get("actorData") or {}),
            extra={k: v for k, v in data.items() if k not in ("_id", "actorId", "actorLink", "actorData")},
        )

    def to_dict(self) -> Dict[str, Any]:
        out = copy.deepcopy(self.extra)
        if self.id is not None:
            out["_id"] = self.id
        if self.actor_id is not None:
            out["actorId"] = self.actor_id
        out["actorLink"] = self.actor_link
        out["actorData"] = copy.deepcopy(self.actor_data)
        return out


@dataclass
class Scene:
    id: str
    name: str = "Unnamed"
    tokens: List[Token] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Scene":
        return Scene(
            id=str(data.get("_id", "")),
            name=data.get("name", "Unnamed"),
            tokens=[Token.from_dict(t) for t in data.get("tokens", [])],
            extra={k: v for k, v in data.items() if k not in ("_id", "name", "tokens")},
        )

    def to_dict(self) -> Dict[str, Any]:
        out = dict(self.extra)
        out.update({"_id": self.id, "name": self.name, "tokens": [t.to_dict() for t in self.tokens]})
        return out

    @property
    def source(self) -> Dict[str, Any]:
        return copy.deepcopy(self.to_dict())

__all__ = ["Scene", "Token"]
