# Core game data constants for the RITS system model
# NOTE: Keep pure data only (no side effects) so imports are cheap.
from types import MappingProxyType

SYSTEM_ID = "rits"

# Old identifier -> new identifier. Order matters for effect keys: substitutions
# are applied in this order, one after the other.
SKILLS_MAP = MappingProxyType({
    "insight": "intuition",
    "prowess": "body",
    "resolve": "willpower",
    "tinker": "engineer",
    "hunt": "stalk",
    "skirmish": "fight",
    "sway": "influence",
})


def _skills(*names):
    return {n: {"label": f"RITS.Skills{n.capitalize()}", "value": 0, "max": 4} for n in names}


# Current character attribute model (labels are localization keys)
CHARACTER_ATTRIBUTES = {
    "intuition": {
        "label": "RITS.Intuition",
        "skills": _skills("stalk", "study", "survey", "engineer"),
    },
    "body": {
        "label": "RITS.Body",
        "skills": _skills("finesse", "prowl", "fight", "wreck"),
    },
    "willpower": {
        "label": "RITS.Willpower",
        "skills": _skills("attune", "command", "consort", "influence"),
    },
}

# Host active-effect change modes
EFFECT_MODES = {
    0: "custom",
    1: "multiply",
    2: "add",
    3: "downgrade",
    4: "upgrade",
    5: "override",
}
