"""Per-record payload builders for the attribute/skill rename migration.

Each function reads one record and returns a sparse payload (see
``models.update``). None of them touch storage.
"""
from __future__ import annotations
import copy
from typing import Any, Dict, Mapping, Optional

from models.actor import Actor
from models.scene import Scene
from models.update import DELETE, Payload, Set
from modules.data_constants import CHARACTER_ATTRIBUTES, SKILLS_MAP
from utils.coercion import coerce_int, is_number

__all__ = ["migrate_actor", "migrate_token_link", "migrate_scene_data", "rename_effect_key"]


def rename_effect_key(key: str, renames: Mapping[str, str] = SKILLS_MAP) -> str:
    """Substitute every renamed identifier inside an effect change path.

    Substitutions run in table order over the running result, so one key can
    pick up several renames ("system.attributes.insight.skills.hunt.value").
    """
    for old, new in renames.items():
        key = key.replace(old, new)
    return key


def _label(attributes: Mapping[str, Any], attribute_name: str, skill_name: Optional[str] = None):
    ref = attributes.get(attribute_name) or {}
    if skill_name is None:
        return ref.get("label")
    return ((ref.get("skills") or {}).get(skill_name) or {}).get("label")


def _set_all(data: Dict[str, Any]) -> Payload:
    return {k: Set(copy.deepcopy(v)) for k, v in data.items()}


def migrate_actor(actor: Actor, attributes: Optional[Mapping[str, Any]] = None) -> Payload:
    """Build the rename-and-coerce payload for one character actor.

    Renamed attributes and skills are copied under their new key with the
    label from the reference model, and the old key is deleted. Skill values
    and the healing clock are coerced to integers; values that cannot be
    parsed become NaN.
    """
    if attributes is None:
        attributes = CHARACTER_ATTRIBUTES
    system = actor.system
    attrs_node: Payload = {}
    for attribute_name, attribute in system.attributes.items():
        new_attribute = SKILLS_MAP.get(attribute_name)
        target = new_attribute or attribute_name

        skills: Payload = {}
        for skill_name, skill in attribute.skills.items():
            new_skill = SKILLS_MAP.get(skill_name)
            node = _set_all(skill.to_dict())
            node["label"] = Set(_label(attributes, target, new_skill or skill_name))
            node["value"] = Set(coerce_int(skill.value))
            skills[new_skill or skill_name] = node
            if new_skill:
                skills[skill_name] = DELETE

        if new_attribute:
            attr_node = _set_all(attribute.extra)
            attr_node["label"] = Set(_label(attributes, new_attribute))
            attr_node["skills"] = skills
            attrs_node[new_attribute] = attr_node
            attrs_node[attribute_name] = DELETE
        else:
            attrs_node[attribute_name] = {"label": Set(_label(attributes, attribute_name)), "skills": skills}

    system_node: Payload = {"attributes": attrs_node}
    if not is_number(system.healing_clock):
        system_node["healing-clock"] = Set(coerce_int(system.healing_clock))

    effects = []
    for effect in actor.effects:
        changes = [
            {"key": rename_effect_key(c.key), "mode": c.mode, "value": copy.deepcopy(c.value)}
            for c in effect.changes
        ]
        effects.append({"_id": effect.id, "changes": changes})

    return {"system": system_node, "effects": Set(effects)}


def migrate_token_link(actor: Actor) -> Payload:
    """Link the actor's prototype token. Unconditional."""
    return {"prototypeToken": {"actorLink": Set(True)}}


def migrate_scene_data(scene: Scene) -> Payload:
    """Link every token placed on the scene and drop its unlinked overrides."""
    tokens = copy.deepcopy(scene.tokens)
    for token in tokens:
        token.actor_link = True
        token.actor_data = {}
    return {"tokens": Set([t.to_dict() for t in tokens])}
