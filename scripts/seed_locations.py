from __future__ import annotations

import sys
from pathlib import Path

import importlib

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.church_attendance.church_attendance.database.bootstrap import seed_locations


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    for line in seed_locations(dict(settings.DB_CONFIG)):
        print(f"OK: {line}")
    print("Please update the coordinates with actual church locations!")


if __name__ == "__main__":
    main()
