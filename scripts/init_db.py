from __future__ import annotations

import sys
from pathlib import Path

import importlib

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.absence_portal.absence_portal.container import build_container, connect
from src.absence_portal.absence_portal.database.bootstrap import apply_schema, ensure_admin_account, list_tables
from src.absence_portal.absence_portal.logging_config import setup_logging


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    db_config = dict(settings.DB_CONFIG)
    conn = connect(db_config)

    schema_path = REPO_ROOT / "database" / "schema.sql"
    apply_schema(conn, database=db_config["database"], schema_path=schema_path)
    tables = list_tables(conn)
    print(
        "OK: Applied schema.sql -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(tables={len(tables)})"
    )

    email = getattr(settings, "ADMIN_EMAIL", None)
    password = getattr(settings, "ADMIN_PASSWORD", None)
    if email and password:
        container = build_container(conn=conn)
        uid = ensure_admin_account(container.identity, container.users_repo, email=email, password=password)
        print(f"OK: admin account {email} (uid={uid})")


if __name__ == "__main__":
    main()
