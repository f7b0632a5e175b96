"""
Configuration Settings Module
==============================

Dataclass-based configuration with validation and defaults.
Follows Single Responsibility Principle - only handles configuration.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Any, Tuple


@dataclass
class SearchConfig:
    """Search request defaults"""
    battery: int = 25
    start: Tuple[int, int] = (0, 0)
    goal: Optional[Tuple[int, int]] = None  # heuristic fallback only

    # Strategies compared by the runner (in order)
    strategies: tuple = ('depth-first', 'breadth-first', 'best-first')

    def __post_init__(self):
        if isinstance(self.battery, bool) or not isinstance(self.battery, int):
            raise ValueError(f"battery must be an integer, got {self.battery!r}")
        if self.battery < 0:
            raise ValueError(f"battery must be non-negative, got {self.battery}")
        self.start = tuple(self.start)
        if self.goal is not None:
            self.goal = tuple(self.goal)


@dataclass
class MapConfig:
    """Random map generation configuration"""
    rows: int = 6
    cols: int = 6

    # Approximate share of cells per terrain
    hill_fraction: float = 0.25
    ditch_fraction: float = 0.15

    # Noise smoothing (cells); larger gives bigger blobs
    smoothing_sigma: float = 1.0

    goal_count: int = 1
    random_start: bool = False

    def __post_init__(self):
        if self.rows < 1 or self.cols < 1:
            raise ValueError(f"Map must be at least 1x1, got {self.rows}x{self.cols}")
        if self.goal_count < 1:
            raise ValueError("goal_count must be at least 1")
        for name in ('hill_fraction', 'ditch_fraction'):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be in [0, 1], got {value}")


@dataclass
class Config:
    """
    Master configuration class combining all sub-configurations.

    Usage:
        config = Config()
        config = Config(search=SearchConfig(battery=40))
    """
    search: SearchConfig = field(default_factory=SearchConfig)
    map: MapConfig = field(default_factory=MapConfig)

    # Global settings
    random_seed: Optional[int] = None
    verbose: bool = False

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'Config':
        """Create Config from dictionary (nested dicts allowed for sections)"""
        config = cls()
        for key, value in d.items():
            if key == 'search' and isinstance(value, dict):
                value = SearchConfig(**value)
            elif key == 'map' and isinstance(value, dict):
                value = MapConfig(**value)
            if hasattr(config, key):
                setattr(config, key, value)
        return config

    def to_dict(self) -> Dict[str, Any]:
        """Export config to dictionary"""
        from dataclasses import asdict
        return asdict(self)
