"""
Configuration for inventory reconciliation.

Holds the matching heuristics (fuzzy threshold, stop words) and costing
precision. Config is declarative JSON - edit the file, not the code.
"""

import json
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path

# Noise words seen on supplier lines: filler plus packaging nouns
DEFAULT_STOP_WORDS = frozenset({
    "the", "and", "with",
    "card", "cards", "booster", "box", "boxes", "ver", "version",
})

DEFAULT_CONFIG_PATH = Path(__file__).parent / "reconcile_config.json"


@dataclass
class MatchSettings:
    """Settings for the product matcher and ledger."""
    fuzzy_threshold: float = 0.5
    min_token_length: int = 3
    stop_words: frozenset[str] = DEFAULT_STOP_WORDS
    cost_places: int = 4
    max_barcode_length: int = 128

    @property
    def cost_quantum(self) -> Decimal:
        """Decimal exponent used to round unit and average costs."""
        return Decimal(1).scaleb(-self.cost_places)


@dataclass
class Config:
    """Full configuration for reconciliation."""
    settings: MatchSettings = field(default_factory=MatchSettings)
    default_currency: str = "GBP"


def default_config() -> Config:
    """Built-in defaults, identical to the shipped JSON file."""
    return Config()


def load_config(config_path: str | Path) -> Config:
    """
    Load configuration from JSON file.

    Missing keys fall back to the built-in defaults.

    Args:
        config_path: Path to reconcile_config.json

    Returns:
        Config object with match settings
    """
    path = Path(config_path)
    with open(path, "r") as f:
        data = json.load(f)

    settings_data = data.get("settings", {})
    stop_words = settings_data.get("stop_words")
    settings = MatchSettings(
        fuzzy_threshold=float(settings_data.get("fuzzy_threshold", 0.5)),
        min_token_length=int(settings_data.get("min_token_length", 3)),
        stop_words=frozenset(w.lower() for w in stop_words) if stop_words is not None else DEFAULT_STOP_WORDS,
        cost_places=int(settings_data.get("cost_places", 4)),
        max_barcode_length=int(settings_data.get("max_barcode_length", 128)),
    )

    if not 0 <= settings.fuzzy_threshold <= 1:
        raise ValueError(f"fuzzy_threshold must be between 0 and 1, got {settings.fuzzy_threshold}")

    return Config(
        settings=settings,
        default_currency=data.get("default_currency", "GBP"),
    )
