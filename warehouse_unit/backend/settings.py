"""
Configuration Loading

Settings live in config/settings.json next to this module; a missing file
falls back to the in-code defaults. WAREHOUSE_SETTINGS overrides the path.
"""

import copy
import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .simulation.logistics.base import ParamValidator

logger = logging.getLogger("Settings")

DEFAULT_SETTINGS_PATH = os.path.join(os.path.dirname(__file__), "config", "settings.json")

# Fallback Defaults
DEFAULTS: Dict[str, Any] = {
    "api_port": 8000,
    "time_step": 0.2,
    "seed": 42,
    "warehouse": {
        "max_capacity": 512,
        "per_line_amount": 8,
    },
    "carriers": {
        "carrier_capacity": 5,
        "traveling_time": 5.0,
        "loading_timeout": 30.0,
    },
    "production": {
        "production_per_minute": 10,
        "pool_storage_positions": 4,
        "item_size": [1.0, 1.0, 1.0],
    },
    "shop": {
        "min_order": 1,
        "max_order": 5,
    },
}


@dataclass
class WarehouseSettings:
    """Validated, flattened settings for one simulation."""
    time_step: float = 0.2
    seed: int = 42
    api_port: int = 8000
    max_capacity: int = 512
    per_line_amount: int = 8
    carrier_capacity: int = 5
    traveling_time: float = 5.0
    loading_timeout: Optional[float] = 30.0
    production_per_minute: float = 10.0
    pool_storage_positions: int = 4
    item_size: Tuple[float, float, float] = (1.0, 1.0, 1.0)
    min_order: int = 1
    max_order: int = 5

    def __post_init__(self):
        ParamValidator.validate_positive(self.time_step, "Time step")
        ParamValidator.validate_non_negative(self.max_capacity, "Max capacity")
        ParamValidator.validate_positive(self.per_line_amount, "Per line amount")
        ParamValidator.validate_positive(self.carrier_capacity, "Carrier capacity")
        ParamValidator.validate_non_negative(self.traveling_time, "Traveling time")
        if self.loading_timeout is not None:
            ParamValidator.validate_positive(self.loading_timeout, "Loading timeout")
        ParamValidator.validate_positive(self.production_per_minute, "Production per minute")
        ParamValidator.validate_positive(self.pool_storage_positions, "Storage positions")
        ParamValidator.validate_positive(self.min_order, "Min order")
        if self.max_order < self.min_order:
            raise ValueError("Max order must not be below min order")
        if len(self.item_size) != 3:
            raise ValueError("Item size must have three components")
        self.item_size = tuple(float(v) for v in self.item_size)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "WarehouseSettings":
        warehouse = raw.get("warehouse", {})
        carriers = raw.get("carriers", {})
        production = raw.get("production", {})
        shop = raw.get("shop", {})
        return cls(
            time_step=raw["time_step"],
            seed=raw["seed"],
            api_port=raw["api_port"],
            max_capacity=warehouse["max_capacity"],
            per_line_amount=warehouse["per_line_amount"],
            carrier_capacity=carriers["carrier_capacity"],
            traveling_time=carriers["traveling_time"],
            loading_timeout=carriers.get("loading_timeout"),
            production_per_minute=production["production_per_minute"],
            pool_storage_positions=production["pool_storage_positions"],
            item_size=tuple(production["item_size"]),
            min_order=shop["min_order"],
            max_order=shop["max_order"],
        )


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path: Optional[str] = None) -> WarehouseSettings:
    """
    Load settings JSON merged over DEFAULTS.

    Raises:
        ValueError: file is not valid JSON or a value fails validation
    """
    config_path = path or os.environ.get("WAREHOUSE_SETTINGS", DEFAULT_SETTINGS_PATH)
    try:
        with open(config_path, "r") as f:
            raw = json.load(f)
    except FileNotFoundError:
        logger.warning(f"Settings file {config_path} not found, using defaults")
        raw = {}
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid settings file {config_path}: {e}") from e

    return WarehouseSettings.from_dict(_merge(DEFAULTS, raw))
