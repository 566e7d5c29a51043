"""Alembic environment for the covergen billing ledger (run via ``flask db``)."""
import importlib
import logging
import os
import pkgutil
from logging.config import fileConfig
from pathlib import Path

from alembic import context
from flask import current_app

config = context.config

_ini_candidates = [config.config_file_name, Path(__file__).resolve().parents[1] / "alembic.ini"]
_ini = next((str(p) for p in _ini_candidates if p and Path(p).exists()), None)
if _ini:
    fileConfig(_ini)
else:
    logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("alembic.env")

_migrate = current_app.extensions["migrate"]
engine = _migrate.db.engine
config.set_main_option("sqlalchemy.url", engine.url.render_as_string(hide_password=False).replace("%", "%%"))

# Ledger indexes (polar_id, user/created_at) are never dropped by autogenerate
# unless named here.
DROPPABLE_INDEXES = frozenset(
    n.strip() for n in os.getenv("ALEMBIC_DROP_INDEX_ALLOWLIST", "").split(",") if n.strip()
)


def ledger_metadata():
    for mod in pkgutil.iter_modules(importlib.import_module("covergen.models").__path__):
        importlib.import_module(f"covergen.models.{mod.name}")
    db = _migrate.db
    return db.metadatas[None] if hasattr(db, "metadatas") else db.metadata


def include_object(obj, name, type_, reflected, compare_to):
    if type_ == "index" and reflected and compare_to is None:
        return name in DROPPABLE_INDEXES
    return True


def skip_empty_revision(ctx, revision, directives):
    if getattr(config.cmd_opts, "autogenerate", False) and directives[0].upgrade_ops.is_empty():
        directives[:] = []
        logger.info("No ledger schema changes detected.")


def configure_options():
    return {
        "target_metadata": ledger_metadata(),
        "compare_type": True,
        "compare_server_default": True,
        "include_object": include_object,
    }


if context.is_offline_mode():
    context.configure(url=config.get_main_option("sqlalchemy.url"), literal_binds=True, **configure_options())
    with context.begin_transaction():
        context.run_migrations()
else:
    options = {"process_revision_directives": skip_empty_revision, **_migrate.configure_args}
    options.update(configure_options())
    with engine.connect() as connection:
        context.configure(connection=connection, **options)
        with context.begin_transaction():
            context.run_migrations()
