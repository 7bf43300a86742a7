"""Calibration configuration and the division tier fallback table."""

import re
from dataclasses import asdict, dataclass, field
from typing import Dict, Optional

# Relative strength of conventional division tiers, premier = 1.0.
# Used when too few bridge players exist to measure divisions directly.
DEFAULT_TIER_MULTIPLIERS: Dict[str, float] = {
    "PREM": 1.0,
    "SD1": 0.92,
    "D1": 0.85,
    "WD1": 0.88,
    "SD2": 0.78,
    "D2": 0.72,
    "WD2": 0.75,
    "D3": 0.62,
    "D4": 0.55,
    "D5": 0.48,
    "D6": 0.42,
    "D7": 0.38,
}

_TIER_PATTERNS = [
    (re.compile(r"^premier"), lambda m: "PREM"),
    (re.compile(r"^super\s*div(?:ision)?\s*(\d+)"), lambda m: f"SD{m.group(1)}"),
    (re.compile(r"^women'?s?\s*div(?:ision)?\s*(\d+)"), lambda m: f"WD{m.group(1)}"),
    (re.compile(r"^div(?:ision)?\s*(\d+)"), lambda m: f"D{m.group(1)}"),
]


@dataclass
class CalibrationConfig:
    """Configuration for bridge detection and strength calibration."""

    # Games a context needs before it is compared
    min_context_games: int = 3
    # Usable bridge players needed for full confidence
    full_confidence_bridge_count: int = 10
    # Below this confidence the tier table replaces the measured offsets
    fallback_confidence_floor: float = 0.3
    iterations: int = 20
    # Weight kept on the previous offset each iteration
    damping: float = 0.5
    tier_multipliers: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_TIER_MULTIPLIERS))
    default_tier_multiplier: float = 0.5
    # Multiplier -> offset scale: (multiplier - 1) * tier_offset_scale
    tier_offset_scale: float = 50.0
    # Minimum name similarity for a cross-league fuzzy match
    bridge_similarity_threshold: float = 0.85

    def __post_init__(self):
        if self.full_confidence_bridge_count < 1:
            raise ValueError("full_confidence_bridge_count must be >= 1")
        if not 0.0 <= self.damping < 1.0:
            raise ValueError("damping must be in [0, 1)")
        if not 0.0 <= self.bridge_similarity_threshold <= 1.0:
            raise ValueError("bridge_similarity_threshold must be in [0, 1]")

    def confidence(self, usable_bridges: int) -> float:
        return min(1.0, usable_bridges / self.full_confidence_bridge_count)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "CalibrationConfig":
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


def resolve_tier(code: str, name: Optional[str] = None) -> Optional[str]:
    """
    Tier key for a division, from its code or its conventional name.

    Args:
        code: Division code, e.g. "D2"
        name: Display name, e.g. "Division 2" or "Women's Division 1"

    Returns:
        Key into the tier table, or None when neither is recognised
    """
    if code.upper() in DEFAULT_TIER_MULTIPLIERS:
        return code.upper()
    for text in (name, code):
        if not text:
            continue
        lowered = text.strip().lower()
        for pattern, to_key in _TIER_PATTERNS:
            match = pattern.match(lowered)
            if match:
                return to_key(match)
    return None


def tier_multiplier(code: str, name: Optional[str], config: CalibrationConfig) -> float:
    tier = resolve_tier(code, name)
    if tier is None:
        return config.default_tier_multiplier
    return config.tier_multipliers.get(tier, config.default_tier_multiplier)
