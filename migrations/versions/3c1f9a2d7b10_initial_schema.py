"""Initial schema: ``users``, ``pokemons`` and ``items`` tables.

Revision ID: 3c1f9a2d7b10
Revises:
Create Date: 2026-10-19 09:12:41.118204
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "3c1f9a2d7b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the three tables and their indexes.

    ``ix_users_username`` is unique: a username can be registered once.
    """
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("username", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_id"), "users", ["id"], unique=False)
    op.create_index(op.f("ix_users_username"), "users", ["username"], unique=True)

    for table, ref_column in (("pokemons", "poke_id"), ("items", "item_id")):
        op.create_table(
            table,
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column(ref_column, sa.Integer(), nullable=False),
            sa.Column("name", sa.String(length=255), nullable=False),
            sa.Column("sprite_url", sa.String(length=512), nullable=True),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(op.f(f"ix_{table}_id"), table, ["id"], unique=False)
        op.create_index(
            op.f(f"ix_{table}_{ref_column}"), table, [ref_column], unique=False
        )
        op.create_index(op.f(f"ix_{table}_name"), table, ["name"], unique=False)


def downgrade() -> None:
    """Drop indexes and tables in reverse order of creation."""
    for table, ref_column in (("items", "item_id"), ("pokemons", "poke_id")):
        op.drop_index(op.f(f"ix_{table}_name"), table_name=table)
        op.drop_index(op.f(f"ix_{table}_{ref_column}"), table_name=table)
        op.drop_index(op.f(f"ix_{table}_id"), table_name=table)
        op.drop_table(table)

    op.drop_index(op.f("ix_users_username"), table_name="users")
    op.drop_index(op.f("ix_users_id"), table_name="users")
    op.drop_table("users")
