# Playback replay checks: actions reproduce the calculated route and undo it.
import copy
import math

from .geom import normalize_angle
from .pathing import calculate_final_pose, generate_playback_actions
from .sim import (
    get_pose_after_actions, build_reverse_playback, points_from_actions, build_actions_from_polyline,
    compute_pose_up_to_section, get_last_pose_of_section,
    recalc_sections_from_points, recalc_section_from_points,
)

_START = {"x": 0.0, "y": 0.0, "theta": 0.0}
_WPS = [
    {"id": "p1", "x": 100, "y": 0},
    {"id": "p2", "x": 100, "y": 100},
    {"id": "p3", "x": 40, "y": 100, "reverse": True},
]


def _close(a, b, tol=0.05):
    return math.isclose(a, b, rel_tol=0.0, abs_tol=tol)


def _px(v):
    return v * 2.0


def test_replay_reaches_final_pose():
    actions = generate_playback_actions(_START, _WPS, 2.0)
    end = get_pose_after_actions(_START, actions, _px)
    expected = calculate_final_pose(_START, _WPS)
    assert _close(end["x"], expected["x"])
    assert _close(end["y"], expected["y"])
    assert _close(end["theta"], expected["theta"], 1e-3)


def test_reverse_playback_returns_to_start():
    actions = [{"type": "rotate", "angle": 90.0}, {"type": "move", "distance": 100.0}]
    undo = build_reverse_playback(actions)
    assert undo == [
        {"type": "move", "distance": -100.0, "reference": "center"},
        {"type": "rotate", "angle": -90.0},
    ]
    end = get_pose_after_actions(get_pose_after_actions(_START, actions, _px), undo, _px)
    assert _close(end["x"], 0.0, 1e-6)
    assert _close(end["y"], 0.0, 1e-6)
    assert _close(end["theta"], 0.0, 1e-9)


def test_reverse_playback_drops_negligible_actions():
    assert build_reverse_playback([{"type": "rotate", "angle": 0.0001}, {"type": "move", "distance": 0.0004}]) == []


def test_points_from_actions():
    pts = points_from_actions([{"type": "move", "distance": 10}, {"type": "move", "distance": -5, "reference": "tip"}], _START, _px)
    assert pts[0] == {"x": 20.0, "y": 0.0, "reverse": False, "reference": "center", "heading": 0.0}
    assert pts[1] == {"x": 10.0, "y": 0.0, "reverse": True, "reference": "tip", "heading": 0.0}


def test_actions_from_polyline():
    acts = build_actions_from_polyline([{"x": 100, "y": 0}, {"x": 100, "y": 100}], _START, lambda px: px / 10)
    assert acts == [
        {"type": "move", "distance": 10.0, "reference": "center"},
        {"type": "rotate", "angle": 90.0},
        {"type": "move", "distance": 10.0, "reference": "center"},
    ]


def test_actions_from_polyline_reverse_and_heading():
    acts = build_actions_from_polyline([{"x": -100, "y": 0, "reverse": True}], _START, lambda px: px / 10)
    assert acts == [{"type": "move", "distance": -10.0, "reference": "center"}]

    acts = build_actions_from_polyline([{"x": 100, "y": 0, "heading": math.pi / 2}], _START, lambda px: px / 10)
    assert acts[0] == {"type": "rotate", "angle": 90.0}


def test_polyline_round_trip():
    acts = build_actions_from_polyline(_WPS, _START, lambda px: px / 2.0)
    pts = points_from_actions(acts, _START, _px)
    assert len(pts) == len(_WPS)
    for wp, pt in zip(_WPS, pts):
        assert _close(pt["x"], wp["x"])
        assert _close(pt["y"], wp["y"])
        assert pt["reverse"] == bool(wp.get("reverse", False))


def _sections():
    return [
        {"id": "A", "color": "#ff0000", "points": [
            {"id": "p1", "x": 100, "y": 0, "heading": 1.234},
            {"id": "p2", "x": 100, "y": 100},
        ]},
        {"id": "B", "color": "#00ff00", "points": [
            {"id": "p3", "x": 40, "y": 100, "reverse": True, "heading": -2.0},
        ]},
    ]


def _to_unit(px):
    return px / 2.0


def test_recalc_keeps_points_and_refreshes_headings():
    sections = _sections()
    before = copy.deepcopy(sections)
    out = recalc_sections_from_points(sections, _START, _px, _to_unit)
    assert sections == before

    for old, new in zip(sections, out):
        assert [(p["x"], p["y"]) for p in new["points"]] == [(p["x"], p["y"]) for p in old["points"]]
    assert out[0]["points"][0]["heading"] == 0.0
    assert _close(out[0]["points"][1]["heading"], math.pi / 2, 1e-12)
    assert out[1]["points"][0]["heading"] == 0.0
    assert out[1]["points"][0]["reverse"] is True

    assert out[0]["actions"] == build_actions_from_polyline(
        [{"x": 100, "y": 0}, {"x": 100, "y": 100}], _START, _to_unit)
    assert out[1]["actions"] == [
        {"type": "rotate", "angle": -90.0},
        {"type": "move", "distance": -30.0, "reference": "center"},
    ]
    assert out[0]["start_angle"] == 0.0
    assert _close(out[0]["end_angle"], 90.0, 1e-9)
    assert _close(out[1]["start_angle"], 90.0, 1e-9)
    assert _close(out[1]["end_angle"], 0.0, 1e-9)


def test_recalc_after_moving_a_point():
    first = recalc_sections_from_points(_sections(), _START, _px, _to_unit)
    edited = copy.deepcopy(first)
    edited[0]["points"][1]["y"] = 150
    out = recalc_sections_from_points(edited, _START, _px, _to_unit)

    assert (out[0]["points"][1]["x"], out[0]["points"][1]["y"]) == (100, 150)
    assert (out[1]["points"][0]["x"], out[1]["points"][0]["y"]) == (40, 100)
    assert out[0]["actions"][-1] == {"type": "move", "distance": 75.0, "reference": "center"}
    assert out[1]["actions"] != first[1]["actions"]
    expected = normalize_angle(math.atan2(-50, -60) + math.pi)
    assert _close(out[1]["points"][0]["heading"], expected, 1e-3)


def test_pose_up_to_section():
    out = recalc_sections_from_points(_sections(), _START, _px, _to_unit)
    assert compute_pose_up_to_section(out, _START, "A", _px) == _START
    at_b = compute_pose_up_to_section(out, _START, "B", _px)
    assert _close(at_b["x"], 100.0, 1e-9) and _close(at_b["y"], 100.0, 1e-9)
    assert _close(at_b["theta"], math.pi / 2, 1e-12)
    end = compute_pose_up_to_section(out, _START, None, _px)
    assert _close(end["x"], 40.0, 1e-9) and _close(end["y"], 100.0, 1e-9)
    assert end["theta"] == 0.0


def test_last_pose_of_section():
    out = recalc_sections_from_points(_sections(), _START, _px, _to_unit)
    last_a = get_last_pose_of_section(out[0], out, _START, _px)
    assert (last_a["x"], last_a["y"]) == (100, 100)
    assert _close(last_a["theta"], math.pi / 2, 1e-12)
    last_b = get_last_pose_of_section(_sections()[1], out, _START, _px)
    assert (last_b["x"], last_b["y"]) == (40, 100)
    assert last_b["theta"] == -2.0
    assert get_last_pose_of_section(None, out, _START, _px) == _START


def test_single_section_recalc_matches_full_pass():
    out = recalc_sections_from_points(_sections(), _START, _px, _to_unit)
    assert recalc_section_from_points(_sections()[1], out, _START, _px, _to_unit) == out[1]


def run():
    for name, fn in sorted(globals().items()):
        if name.startswith("test_") and callable(fn):
            fn()
    print("sim checks passed")


if __name__ == "__main__":
    run()
