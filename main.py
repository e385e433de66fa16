# main.py
"""Compile a saved WRO routine into robot instructions."""
import argparse
import sys

from wro.config import load_config, canvas_flat, field_flat, grid_flat
from wro.geom import pixels_per_unit as canvas_pixels_per_unit
from wro.pathing import flatten_sections_to_waypoints, generate_playback_actions
from wro.codegen import build_compile_lines, build_playback_lines
from wro.storage import load_routine, compile_log

APP_TITLE = "WRO ROUTE PLANNER"


def resolve_pixels_per_unit(cfg, unit, override=None):
    """Explicit override, else the canvas scale, else the grid setting."""
    if override:
        return float(override)
    canvas = canvas_flat(cfg)
    ppu = canvas_pixels_per_unit(canvas.get("width", 0), unit, canvas.get("zoom", 1.0) or 1.0)
    if ppu > 0:
        return ppu
    return float(grid_flat(cfg).get("pixels_per_unit", 1) or 1)


def build_parser():
    parser = argparse.ArgumentParser(description=f"{APP_TITLE} - compile a routine file")
    parser.add_argument("routine", help="routine JSON saved by the planner")
    parser.add_argument("--config", default=None, help="config.json to use")
    parser.add_argument("--unit", choices=["cm", "mm"], default=None)
    parser.add_argument("--pixels-per-unit", type=float, default=None,
                        help="override the canvas scale")
    parser.add_argument("--playback", action="store_true", help="print rotate/move actions instead")
    parser.add_argument("--output", default=None, help="also write the listing to this file")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        cfg = load_config(args.config)
        unit = args.unit or field_flat(cfg).get("unit", "cm")
        ppu = resolve_pixels_per_unit(cfg, unit, args.pixels_per_unit)
        initial, sections, _missions = load_routine(args.routine)
    except (OSError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    waypoints = flatten_sections_to_waypoints(sections)
    if args.playback:
        lines = build_playback_lines(generate_playback_actions(initial, waypoints, ppu), unit)
    else:
        lines = build_compile_lines(initial, waypoints, ppu, unit)

    for line in lines:
        print(line)
    if args.output:
        try:
            compile_log(lines, args.output)
        except OSError as e:
            print(f"Error: {e}")
            return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
