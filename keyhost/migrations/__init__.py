"""
Alembic migration environment for the Keyhost schema.

Revisions live in ``versions/`` and form one linear chain. Each revision
inspects the live schema first, so upgrading a database that already has
some of the objects (or re-running after ``stamp base``) is safe.
"""

from pathlib import Path
from typing import Optional
from alembic.config import Config
from keyhost.config import settings

MIGRATIONS_DIR = Path(__file__).resolve().parent


def get_alembic_config(database_url: Optional[str] = None, connection=None) -> Config:
    """
    Build an Alembic config without relying on the working directory.

    Args:
        database_url: Target database, defaults to the configured one
        connection: Open SQLAlchemy connection to run on instead of a URL

    Returns:
        Alembic ``Config``
    """
    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_DIR))
    # ConfigParser interpolation treats % as special
    config.set_main_option("sqlalchemy.url", (database_url or settings.database_url).replace("%", "%%"))
    if connection is not None:
        config.attributes["connection"] = connection
    return config
