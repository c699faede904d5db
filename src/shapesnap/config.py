"""
Configuration management for ShapeSnap.

Loads YAML configuration with defaults for the recognition thresholds, hit
testing, the optional shape oracle, tracing and debug artifacts.
"""

import os
from dataclasses import asdict, dataclass, field

import yaml


@dataclass
class RecognitionConfig:
    """
    Thresholds for the stroke classifier.

    The two circle cutoffs are separate gates: the looser one applies only
    when no corners were found.
    """
    min_points: int = 10
    line_ratio: float = 0.85  # endpoint gap over path length
    closure_ratio: float = 0.3
    min_spacing: float = 5.0
    spacing_divisor: float = 40.0  # bbox diagonal / divisor
    straw_window: int = 3
    straw_ratio: float = 0.95
    min_corner_points: int = 10
    corner_merge_gap: int = 3
    wraparound_gap: int = 4
    circle_radius_ratio_no_corners: float = 0.25
    circle_radius_ratio: float = 0.20
    square_area_ratio: float = 0.80
    triangle_area_ratio: float = 0.65


@dataclass
class HitTestConfig:
    """Configuration for proximity and containment tests."""
    threshold: float = 10.0
    text_width_factor: float = 0.6  # per character, times font size
    text_height_factor: float = 1.5


@dataclass
class OracleConfig:
    """Configuration for the optional external shape oracle."""
    enabled: bool = False
    policy: str = "ignore"  # "ignore" or "confirm"
    timeout_seconds: float = 10.0
    image_size: int = 256
    padding: int = 10
    line_thickness: int = 4


@dataclass
class TracingConfig:
    """Configuration for runtime tracing."""
    enabled: bool = False
    level: str = "INFO"
    file_path: str = None
    json_output: bool = False


@dataclass
class DebugConfig:
    """Configuration for debug artifact generation."""
    enabled: bool = False
    max_strokes: int = 50
    canvas_margin: int = 20
    max_canvas_size: int = 1024  # pixels, longest side


@dataclass
class EngineConfig:
    """Complete engine configuration."""
    recognition: RecognitionConfig = field(default_factory=RecognitionConfig)
    hit_test: HitTestConfig = field(default_factory=HitTestConfig)
    oracle: OracleConfig = field(default_factory=OracleConfig)
    tracing: TracingConfig = field(default_factory=TracingConfig)
    debug: DebugConfig = field(default_factory=DebugConfig)


SECTIONS = ("recognition", "hit_test", "oracle", "tracing", "debug")


def load_config(config_path=None):
    """
    Load configuration from YAML file.

    Falls back to defaults for any missing values.
    """
    config = EngineConfig()

    if config_path and os.path.exists(config_path):
        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f) or {}

        config = _merge_config(config, yaml_data)

    return config


def _merge_config(config, yaml_data):
    """Merge YAML data into config dataclass. Unknown keys are ignored."""
    for section_name in SECTIONS:
        section_data = yaml_data.get(section_name)
        if not isinstance(section_data, dict):
            continue
        section = getattr(config, section_name)
        for key, value in section_data.items():
            if hasattr(section, key):
                setattr(section, key, value)

    return config


def save_default_config(path):
    """Save default configuration to YAML file for reference."""
    yaml_data = asdict(EngineConfig())

    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(yaml_data, f, default_flow_style=False, sort_keys=False)
