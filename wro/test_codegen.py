# Reporting checks: grouping, formatting, totals and the compile listing.
from .codegen import (
    group_instructions_by_section, summarize_sections, format_instruction,
    calculate_total_path_length, calculate_total_rotation,
    build_compile_lines, build_playback_lines,
)

_INSTR = [
    {"type": "TURN", "value": 90.0, "section_id": "s1", "waypoint_id": "p1", "direction": "right"},
    {"type": "MOVE", "value": 10.0, "section_id": "s1", "waypoint_id": "p1", "direction": "forward"},
    {"type": "TURN", "value": -45.0, "section_id": None, "waypoint_id": "p2", "direction": "left"},
    {"type": "MOVE", "value": 5.5, "section_id": "s2", "waypoint_id": "p3", "direction": "reverse"},
    {"type": "MOVE", "value": 2.0, "section_id": "s1", "waypoint_id": "p4", "direction": "forward"},
]


def test_group_by_section():
    groups = group_instructions_by_section(_INSTR)
    assert list(groups) == ["s1", "default", "s2"]
    assert [i["waypoint_id"] for i in groups["s1"]] == ["p1", "p1", "p4"]
    assert groups["default"] == [_INSTR[2]]


def test_summarize_sections_uses_waypoint_meta():
    wps = [
        {"id": "p1", "section_id": "s1", "section_color": "#ff0000", "section_name": "Start"},
        {"id": "p3", "section_id": "s2", "section_color": "#00ff00"},
    ]
    groups = summarize_sections(_INSTR, wps)
    assert [g["id"] for g in groups] == ["s1", "default", "s2"]
    assert groups[0]["name"] == "Start"
    assert groups[0]["color"] == "#ff0000"
    assert groups[1]["color"] == "#888888"
    assert groups[2]["name"] == "s2"
    assert len(groups[0]["instructions"]) == 3


def test_format_instruction():
    assert format_instruction({"type": "TURN", "value": 12.5}) == "TURN RIGHT 12.5°"
    assert format_instruction({"type": "TURN", "value": -45}) == "TURN LEFT 45.0°"
    assert format_instruction({"type": "MOVE", "value": 34.2, "direction": "forward"}) == "MOVE FORWARD 34.2 cm"
    assert format_instruction({"type": "MOVE", "value": 7.25, "direction": "reverse"}, "mm") == "MOVE REVERSE 7.3 mm"


def test_format_unknown_does_not_raise():
    assert format_instruction({"type": "JUMP", "value": 3}) == 'UNKNOWN: {"type": "JUMP", "value": 3}'
    assert format_instruction({"type": "MOVE"}).startswith("UNKNOWN: ")
    assert format_instruction(None) == "UNKNOWN: null"
    assert format_instruction({"type": "TURN", "value": object()}).startswith("UNKNOWN: ")


def test_totals():
    assert calculate_total_path_length(_INSTR) == 17.5
    assert calculate_total_rotation(_INSTR) == 135.0
    assert calculate_total_path_length([]) == 0
    assert calculate_total_rotation([]) == 0


def test_compile_lines():
    start = {"x": 0.0, "y": 0.0, "theta": 0.0}
    wps = [
        {"id": "p1", "x": 50, "y": 0, "section_id": "s1", "section_color": "#ff0000"},
        {"id": "p2", "x": 50, "y": 50, "section_id": "s2", "section_color": "#00ff00"},
    ]
    lines = build_compile_lines(start, wps, 5, "cm")
    assert lines[0] == "=== WRO ROUTE COMPILE ==="
    assert " --- Section s1 (#ff0000) ---" in lines
    assert "  MOVE FORWARD 10.0 cm" in lines
    assert "  TURN RIGHT 90.0°" in lines
    assert "Total distance: 20.00 cm" in lines
    assert "Total rotation: 90.00 deg" in lines
    assert lines[-1] == "Final pose: (50.0 px, 50.0 px) heading 90.00 deg"


def test_playback_lines():
    actions = [{"type": "rotate", "angle": -90.0}, {"type": "move", "distance": -12.5}]
    assert build_playback_lines(actions) == ["rotate -90.00 deg", "move -12.50 cm"]


def run():
    for name, fn in sorted(globals().items()):
        if name.startswith("test_") and callable(fn):
            fn()
    print("codegen checks passed")


if __name__ == "__main__":
    run()
