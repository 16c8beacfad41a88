from logging.config import fileConfig
from alembic import context
from sqlalchemy import engine_from_config, pool
import os
from devcamper.db.session import Base

# import models
from devcamper.models.user import User
from devcamper.models.bootcamp import Bootcamp
from devcamper.models.course import Course
from devcamper.models.review import Review

config = context.config
fileConfig(config.config_file_name, disable_existing_loggers=False)
target_metadata = Base.metadata

def get_url():
    return os.getenv("DATABASE_URL")

def run_migrations_offline():
    context.configure(url=get_url(), target_metadata=target_metadata, literal_binds=True, compare_type=True)
    with context.begin_transaction():
        context.run_migrations()

def run_migrations_online():
    cfg = config.get_section(config.config_ini_section)
    cfg["sqlalchemy.url"] = get_url()
    connectable = engine_from_config(cfg, prefix="sqlalchemy.", poolclass=pool.NullPool)
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata, compare_type=True)
        with context.begin_transaction():
            context.run_migrations()

if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
