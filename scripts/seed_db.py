from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.workforce_admin.workforce_admin.database.bootstrap import (
    DEMO_PROFILES,
    apply_seed_sql,
    ensure_demo_profiles,
)

logger = logging.getLogger("seed_db")


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(module)s - %(message)s")
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    ensure_demo_profiles(db_config)
    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")

    logger.info("Seeded %s", db_config.get("database"))
    for full_name, email, password, role, _ in DEMO_PROFILES:
        print(f"  {role:<12} {email:<28} {password}")


if __name__ == "__main__":
    main()
