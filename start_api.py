#!/usr/bin/env python3
"""
Container entrypoint: wait for the database, migrate to head, seed the admin
account, then replace this process with uvicorn serving skybook.main:app.
"""
import logging
import os
import sys

ROOT = os.path.dirname(os.path.abspath(__file__))

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper(), format="%(asctime)s | %(levelname)s | %(name)s | %(message)s")
logger = logging.getLogger("skybook.start")


def migrate(database_url: str) -> None:
    from alembic import command
    from alembic.config import Config

    cfg = Config(os.path.join(ROOT, "alembic.ini"))
    cfg.set_main_option("sqlalchemy.url", database_url)
    command.upgrade(cfg, "head")
    logger.info("migrations at head")


def seed(database_url: str) -> None:
    # Own engine: the app engine may have been created while alembic loaded env.py.
    from sqlalchemy import create_engine
    from sqlalchemy.orm import sessionmaker
    from skybook.seed import run as run_seed

    engine = create_engine(database_url, pool_pre_ping=True)
    db = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        run_seed(db)
    finally:
        db.close()
        engine.dispose()


def serve(host: str, port: int) -> None:
    logger.info("starting uvicorn on %s:%s", host, port)
    os.execv(
        sys.executable,
        [sys.executable, "-m", "uvicorn", "skybook.main:app", "--host", host, "--port", str(port)],
    )


def main() -> None:
    import wait_for_db  # noqa: F401  (blocks until Postgres accepts connections)
    from skybook.core.config import settings

    migrate(settings.DATABASE_URL)
    seed(settings.DATABASE_URL)
    serve(settings.HOST, settings.PORT)


if __name__ == "__main__":
    main()
