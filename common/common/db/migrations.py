# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""Body of the alembic env.py of every service"""

from logging.config import fileConfig

from alembic import context

import common.db.database as db
from common.config import DBConfig


def run_migrations() -> None:
    config = context.config
    if config.config_file_name is not None:
        fileConfig(config.config_file_name, disable_existing_loggers=False)

    url = config.get_main_option("sqlalchemy.url")
    if context.is_offline_mode():
        context.configure(
            url=url,
            target_metadata=db.Base.metadata,
            literal_binds=True,
            dialect_opts={"paramstyle": "named"},
        )
        with context.begin_transaction():
            context.run_migrations()
        return

    engine = db.get_engine(url, DBConfig().SQLALCHEMY_DATABASE_SCHEMA)
    with engine.connect() as connection:
        # batch mode, sqlite can not alter tables
        context.configure(connection=connection, target_metadata=db.Base.metadata, render_as_batch=True)
        with context.begin_transaction():
            context.run_migrations()
