"""Alembic environment for the formflow schema.

Three tables are managed here: ``feedback_submissions`` and ``cases`` (one
per journey that persists records) and ``journey_sessions`` (server-side
session state).  Revisions are applied through the synchronous URL from
``get_sync_url()``; the runtime uses asyncpg.

Column type changes are compared too, so widening a column such as
``cases.plan_title`` shows up in autogenerate.
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from formflow_db.config import get_sync_url
from formflow_db.models import Base, SUBMISSION_MODELS, JourneySession

config = context.config
config.set_main_option("sqlalchemy.url", get_sync_url())

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

MANAGED_TABLES = {*SUBMISSION_MODELS, JourneySession.__tablename__}


def include_object(obj, name, type_, reflected, compare_to) -> bool:
    """Ignore tables in the database that no formflow model declares."""
    if type_ == "table":
        return name in MANAGED_TABLES
    return True


def _configure(**kwargs) -> None:
    context.configure(
        target_metadata=target_metadata,
        include_object=include_object,
        compare_type=True,
        **kwargs,
    )


def run_migrations_offline() -> None:
    """Write the upgrade SQL to stdout for review."""
    _configure(
        url=config.get_main_option("sqlalchemy.url"),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply pending revisions over a single unpooled connection."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        _configure(connection=connection)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
