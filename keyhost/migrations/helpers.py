"""
Schema inspection helpers shared by the revisions.

The inspector is rebuilt on every call because revisions create objects as
they go and a cached inspector would not see them.
"""

from typing import List, Set
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import mysql

from keyhost.database import long_text  # noqa: F401  used by the revisions


def table_names() -> Set[str]:
    return set(sa.inspect(op.get_bind()).get_table_names())


def column_names(table: str) -> Set[str]:
    return {column["name"] for column in sa.inspect(op.get_bind()).get_columns(table)}


def index_names(table: str) -> Set[str]:
    return {index["name"] for index in sa.inspect(op.get_bind()).get_indexes(table)}


def id_column() -> sa.Column:
    return sa.Column("id", sa.Uuid(), primary_key=True)


def timestamp_columns() -> List[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def enum_type(name: str, *values: str) -> sa.Enum:
    return sa.Enum(*values, name=name)


def create_table_if_missing(name: str, *columns, **kwargs) -> bool:
    """
    Create the table unless it exists.

    Returns:
        True if the table was created
    """
    if name in table_names():
        return False
    op.create_table(name, *columns, **kwargs)
    return True


def create_index_if_missing(name: str, table: str, columns: List[str], unique: bool = False) -> None:
    if name not in index_names(table):
        op.create_index(name, table, columns, unique=unique)


def drop_table_if_exists(name: str) -> None:
    if name in table_names():
        op.drop_table(name)


def drop_enum_types(*names: str) -> None:
    """Drop native enum types left behind by dropped tables (PostgreSQL only)."""
    bind = op.get_bind()
    if bind.dialect.name != "postgresql":
        return
    for name in names:
        sa.Enum(name=name).drop(bind, checkfirst=True)


def is_long_text(dialect_name: str, reflected_type) -> bool:
    """
    Whether a reflected column type already holds unbounded text.

    MySQL reflects TEXT and LONGTEXT as separate subclasses of ``sa.Text``,
    so only LONGTEXT counts there.
    """
    if dialect_name in ("mysql", "mariadb"):
        return isinstance(reflected_type, mysql.LONGTEXT)
    return isinstance(reflected_type, sa.Text)


def column_type(table: str, column: str):
    for reflected in sa.inspect(op.get_bind()).get_columns(table):
        if reflected["name"] == column:
            return reflected["type"]
    return None
