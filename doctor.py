"""Run local environment checks for the WRO route planner."""

import os
import platform
import sys
from pathlib import Path


def _ok(flag: bool) -> str:
    return "PASS" if flag else "FAIL"


def _can_write(path: Path) -> bool:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        probe = path.parent / ".wro_write_test"
        probe.write_text("ok", encoding="utf-8")
        probe.unlink()
        return True
    except OSError:
        return False


def main() -> int:
    root = Path(__file__).resolve().parent
    print("WRO Route Planner Doctor")
    print(f"- OS: {platform.system()} {platform.release()}")
    print(f"- Python: {platform.python_version()} ({sys.executable})")

    py_ok = sys.version_info >= (3, 8)
    print(f"[{_ok(py_ok)}] Python >= 3.8")
    if not py_ok:
        return 1

    os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
    try:
        import pygame  # noqa: F401
        pg_ok = True
    except ImportError:
        pg_ok = False
    print(f"[{_ok(pg_ok)}] pygame available")

    required = [
        root / "main.py",
        root / "wro" / "config.py",
        root / "wro" / "pathing.py",
    ]
    files_ok = all(p.exists() for p in required)
    print(f"[{_ok(files_ok)}] core files present")
    if not files_ok:
        for p in required:
            if not p.exists():
                print(f"       Missing: {p}")

    try:
        from wro.config import default_config_path

        cfg_path = Path(default_config_path())
        pkg_ok = True
    except Exception as e:
        print(f"       wro import failed: {e}")
        cfg_path = root / "config.json"
        pkg_ok = False
    print(f"[{_ok(pkg_ok)}] wro package importable")
    writable = _can_write(cfg_path)
    print(f"[{_ok(writable)}] writable config path available")

    all_ok = py_ok and pg_ok and files_ok and pkg_ok and writable
    if all_ok:
        print("All checks passed.")
        return 0
    print("One or more checks failed.")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
