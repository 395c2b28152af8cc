from __future__ import annotations

import argparse
import sys
from pathlib import Path

import importlib

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.absence_portal.absence_portal.container import build_container, connect
from src.absence_portal.absence_portal.core.enums import Role
from src.absence_portal.absence_portal.logging_config import setup_logging


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Bulk-load timetable entries from a CSV file.")
    parser.add_argument("csv_path", type=Path)
    args = parser.parse_args(argv)

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(conn=connect(dict(settings.DB_CONFIG)))
    text = args.csv_path.read_text(encoding="utf-8-sig")
    summary = container.timetable_service.import_csv(current_role=Role.ADMIN, text=text)
    print(f"OK: imported={summary.imported} skipped={summary.skipped}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
