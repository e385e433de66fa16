# wro/config.py
from __future__ import annotations
import json, math, os
from typing import Optional

DEG2RAD = math.pi / 180.0
RAD2DEG = 180.0 / math.pi

# Reference mat (RoboMission 2025)
MAT_MM = {"w": 2362, "h": 1143}
MAT_CM = {"w": MAT_MM["w"] / 10, "h": MAT_MM["h"] / 10}

# Route calculation
DISTANCE_EPS_PX    = 1e-6
TURN_THRESHOLD_DEG = 0.1
ROUND_DIGITS       = 2

DEFAULT_SECTION_COLOR = "#888888"
DEFAULT_REFERENCE     = "center"
DEFAULT_SECTION_KEY   = "default"

SNAP_45_BASE_ANGLES = [0.0, math.pi / 4, math.pi / 2, (3 * math.pi) / 4]

FIELD_PRESETS = [
    {"key": "junior",        "name": "RoboMission Junior 2025"},
    {"key": "elementary",    "name": "RoboMission Elementary 2025"},
    {"key": "double-tennis", "name": "RoboSports Double Tennis 2025"},
    {"key": "custom",        "name": "Custom"},
]

DEFAULT_GRID  = {"cell_size": 1, "pixels_per_unit": 5, "line_alpha": 0.35,
                 "offset_x": 0, "offset_y": 0, "color": "#000000"}
DEFAULT_ROBOT = {"width": 18, "length": 20, "color": "#0ea5e9", "opacity": 1}
ZOOM_LIMITS   = {"min": 0.5, "max": 2, "step": 0.25}

CONFIG_FILENAME = "config.json"

DEFAULT_CONFIG = {
    "field": {
        "preset": {"value": "junior"},
        "unit":   {"value": "cm"},
    },
    "canvas": {
        "width":  {"value": 1181},
        "height": {"value": 571},
        "zoom":   {"value": 1.0},
    },
    "grid": {k: {"value": v} for k, v in DEFAULT_GRID.items()},
    "robot": {k: {"value": v} for k, v in DEFAULT_ROBOT.items()},
}

# Robot dimension storage
ROBOT_CONFIG_FILENAME = "robot_config.json"
CONFIG_VERSION = 1


def _flatten(section: dict) -> dict:
    """Extract 'value' from nested dict structure."""
    flat = {}
    for k, v in section.items():
        flat[k] = v.get("value", v) if isinstance(v, dict) and "value" in v else v
    return flat

def _load_json(path: str) -> Optional[dict]:
    """Load JSON file, return None on failure."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError):
        return None

def _save_json(path: str, data: dict) -> None:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)

def default_config_path() -> str:
    here = os.path.dirname(__file__)
    return os.path.normpath(os.path.join(here, os.pardir, CONFIG_FILENAME))

def load_config(path: Optional[str] = None) -> dict:
    """Load config from disk, create the default file if missing."""
    path = path or default_config_path()
    data = _load_json(path)
    if data is None:
        data = json.loads(json.dumps(DEFAULT_CONFIG))
        try:
            _save_json(path, data)
        except OSError as e:
            print(f"Could not write default config: {e}")
    return data

def save_config(cfg_dict: dict, path: Optional[str] = None) -> bool:
    """Save a flat config dictionary in the wrapped on-disk layout."""
    path = path or default_config_path()
    try:
        def wrap(v): return {"value": v}
        raw = {
            "field":  {k: wrap(v) for k, v in cfg_dict.get("field", {}).items()},
            "canvas": {k: wrap(float(v)) for k, v in cfg_dict.get("canvas", {}).items()},
            "grid":   {k: wrap(v) for k, v in cfg_dict.get("grid", {}).items()},
            "robot":  {k: wrap(v) for k, v in cfg_dict.get("robot", {}).items()},
        }
        _save_json(path, raw)
        print(f"Config saved to {path}")
        return True
    except (OSError, TypeError, ValueError) as e:
        print(f"Failed to save config: {e}")
        return False

def field_flat(cfg: dict) -> dict:
    """Flatten field section; unknown presets fall back to the default one."""
    field = {**_flatten(DEFAULT_CONFIG["field"]), **_flatten(cfg.get("field", {}))}
    if field.get("preset") not in {p["key"] for p in FIELD_PRESETS}:
        field["preset"] = DEFAULT_CONFIG["field"]["preset"]["value"]
    if field.get("unit") not in ("cm", "mm"):
        field["unit"] = "cm"
    return field

def canvas_flat(cfg: dict) -> dict:
    """Flatten canvas section, zoom clamped to ZOOM_LIMITS."""
    canvas = {**_flatten(DEFAULT_CONFIG["canvas"]), **_flatten(cfg.get("canvas", {}))}
    try:
        canvas["zoom"] = max(ZOOM_LIMITS["min"], min(ZOOM_LIMITS["max"], float(canvas.get("zoom") or 1.0)))
    except (TypeError, ValueError):
        canvas["zoom"] = 1.0
    return canvas

def grid_flat(cfg: dict) -> dict:
    """Flatten grid section."""
    return {**DEFAULT_GRID, **_flatten(cfg.get("grid", {}))}

def robot_flat(cfg: dict) -> dict:
    """Flatten robot section."""
    return {**DEFAULT_ROBOT, **_flatten(cfg.get("robot", {}))}

def get_default_robot_config() -> dict:
    """Default robot dimensions in cm, matching DEFAULT_ROBOT."""
    return {
        "version": CONFIG_VERSION,
        "length": 20,
        "width": 18,
        "wheel_offset": 10,  # front to wheel axis
    }

def default_robot_config_path() -> str:
    return os.path.join(os.path.dirname(default_config_path()), ROBOT_CONFIG_FILENAME)

def load_robot_config(path: Optional[str] = None) -> Optional[dict]:
    """
    Load stored robot dimensions.
    Returns None when nothing usable is stored, so callers fall back to defaults.
    """
    path = path or default_robot_config_path()
    if not os.path.exists(path):
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            config = json.load(f)
    except (OSError, ValueError) as e:
        print(f"Failed to load robot config from {path}: {e}")
        return None

    if not isinstance(config, dict) or config.get("version") != CONFIG_VERSION:
        return None
    if not is_number(config.get("length")) or not is_number(config.get("width")):
        return None
    return config

def save_robot_config(config: dict, path: Optional[str] = None) -> None:
    """Persist robot dimensions; wheel_offset only when provided."""
    path = path or default_robot_config_path()
    to_save = {
        "version": CONFIG_VERSION,
        "length": config.get("length"),
        "width": config.get("width"),
    }
    if is_number(config.get("wheel_offset")):
        to_save["wheel_offset"] = config["wheel_offset"]
    try:
        _save_json(path, to_save)
    except OSError as e:
        print(f"Failed to save robot config to {path}: {e}")

def is_number(v) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)
