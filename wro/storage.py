# wro/storage.py
from __future__ import annotations
import json, os

from .config import is_number
from .missions import import_missions

DEFAULT_INITIAL_POSE = {"x": 0.0, "y": 0.0, "theta": 0.0}


def save_routine(path: str, initial_pose, sections, missions=None) -> str:
    """Save routine (start pose, sections, mission markers) to JSON file."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump({"initial": initial_pose, "sections": sections, "missions": missions or []}, f, indent=4)
    return path

def load_routine(path: str):
    """
    Load routine from JSON file.
    Returns (initial_pose, sections, missions); raises ValueError on a
    payload without a sections list.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict) or not isinstance(data.get("sections"), list):
        raise ValueError(f"Invalid routine file {path}: sections list not found.")
    raw_initial = data.get("initial") or {}
    if not isinstance(raw_initial, dict):
        raise ValueError(f"Invalid routine file {path}: initial pose must be an object.")
    for section in data["sections"]:
        if not isinstance(section, dict):
            raise ValueError(f"Invalid routine file {path}: section is not an object: {section!r}")
        points = section.get("points")
        for pt in points if isinstance(points, list) else []:
            if not isinstance(pt, dict) or not (is_number(pt.get("x")) and is_number(pt.get("y"))):
                raise ValueError(f"Invalid routine file {path}: point without numeric x/y: {pt!r}")
    initial = {**DEFAULT_INITIAL_POSE, **raw_initial}
    for key in ("x", "y", "theta"):
        if not is_number(initial[key]):
            raise ValueError(f"Invalid routine file {path}: initial {key} is not a number.")
    missions = import_missions(data) if "missions" in data else []
    return initial, data["sections"], missions

def compile_log(lines, path: str) -> str:
    """Export compiled output to text file."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        for line in lines:
            f.write(line + "\n")
    print(f"Exported compile output to: {path}")
    return path
