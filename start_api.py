#!/usr/bin/env python3
"""
Run migrations (same process, same DATABASE_URL), then seed, then uvicorn.
Ensures tables exist before seed and app start.
"""
import os
import sys

# 1) Wait for DB
import wait_for_db  # noqa: F401

# 2) Run migrations using the same settings as the app
from flightdesk.core.config import settings
from flightdesk.core.log import setup_logging
from alembic.config import Config
from alembic import command

setup_logging()
alembic_cfg = Config(os.path.join(os.path.dirname(__file__), "alembic.ini"))
alembic_cfg.set_main_option("sqlalchemy.url", settings.DATABASE_URL)
command.upgrade(alembic_cfg, "head")

# 3) Seed through a storage handle created *after* migrations
from flightdesk.db.session import Storage
from flightdesk.seed import run as run_seed

seed_storage = Storage(settings.DATABASE_URL)
with seed_storage.session_scope() as seed_db:
    run_seed(seed_db)
seed_storage.dispose()

# 4) Start uvicorn (replace current process)
os.execv(
    sys.executable,
    [sys.executable, "-m", "uvicorn", "flightdesk.main:app", "--host", "0.0.0.0", "--port", os.getenv("PORT", "8000")],
)
