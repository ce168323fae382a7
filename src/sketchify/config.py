"""
Configuration management for Sketchify.

Loads YAML configuration with sensible defaults for the rough renderer,
the hachure filler and SVG output.
"""

import dataclasses
import os
from dataclasses import dataclass, field

import yaml


@dataclass(frozen=True)
class RoughConfig:
    """Behavior of the hand-drawn stroke synthesizer. Immutable per call."""
    max_randomness_offset: float = 2.0
    roughness: float = 1.0
    bowing: float = 1.5
    disable_multi_stroke: bool = False
    disable_multi_stroke_fill: bool = False
    curve_tightness: float = 0.0
    curve_fitting: float = 0.95
    curve_step_count: float = 9.0
    hachure_angle: float = -41.0
    hachure_gap: float = 3.0  # negative means stroke_width * 4
    stroke_width: float = 0.5
    seed: int = 0  # 0 means unseeded


@dataclass
class FillConfig:
    """Configuration for hachure filling."""
    connect_ends: bool = False
    flatten_tolerance: float = 1.0


@dataclass
class OutputConfig:
    """Configuration for path data and SVG output."""
    stroke_color: str = "black"
    fill_color: str = "black"
    precision: int = 3


@dataclass
class TracingConfig:
    """Configuration for runtime tracing."""
    enabled: bool = False
    level: str = "INFO"
    file_path: str = None
    json_output: bool = False


@dataclass
class SketchConfig:
    """Complete sketch configuration."""
    rough: RoughConfig = field(default_factory=RoughConfig)
    fill: FillConfig = field(default_factory=FillConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    tracing: TracingConfig = field(default_factory=TracingConfig)


def clone_with_advanced_seed(config):
    """
    Return a copy of a RoughConfig whose seed is advanced by one.

    Unseeded configs stay unseeded.
    """
    if config.seed:
        return dataclasses.replace(config, seed=config.seed + 1)
    return dataclasses.replace(config)


def load_config(config_path=None):
    """
    Load configuration from YAML file.

    Falls back to defaults for any missing values.
    """
    config = SketchConfig()

    if config_path and os.path.exists(config_path):
        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f) or {}

        config = _merge_config(config, yaml_data)

    return config


def _merge_config(config, yaml_data):
    """Merge YAML data into config dataclass."""
    if "rough" in yaml_data:
        # Frozen, so rebuild instead of setattr
        known = {f.name for f in dataclasses.fields(RoughConfig)}
        updates = {k: v for k, v in yaml_data["rough"].items() if k in known}
        config.rough = dataclasses.replace(config.rough, **updates)

    if "fill" in yaml_data:
        for key, value in yaml_data["fill"].items():
            if hasattr(config.fill, key):
                setattr(config.fill, key, value)

    if "output" in yaml_data:
        for key, value in yaml_data["output"].items():
            if hasattr(config.output, key):
                setattr(config.output, key, value)

    if "tracing" in yaml_data:
        for key, value in yaml_data["tracing"].items():
            if hasattr(config.tracing, key):
                setattr(config.tracing, key, value)

    return config


def save_default_config(path):
    """Save default configuration to YAML file for reference."""
    config = SketchConfig()

    yaml_data = {
        "rough": dataclasses.asdict(config.rough),
        "fill": {
            "connect_ends": config.fill.connect_ends,
            "flatten_tolerance": config.fill.flatten_tolerance,
        },
        "output": {
            "stroke_color": config.output.stroke_color,
            "fill_color": config.output.fill_color,
            "precision": config.output.precision,
        },
        "tracing": {
            "enabled": config.tracing.enabled,
            "level": config.tracing.level,
        },
    }

    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(yaml_data, f, default_flow_style=False, sort_keys=False)
