"""create widget store tables

Revision ID: 5c1d9a2e7f40
Revises:
Create Date: 2026-10-19 09:12:04.318552

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "5c1d9a2e7f40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    for table_name in ("stored_secrets", "review_snapshots"):
        op.create_table(
            table_name,
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("key", sa.String(length=100), nullable=False),
            sa.Column("value", sa.Text(), nullable=False),
            sa.Column(
                "updated_at",
                sa.DateTime(timezone=True),
                server_default=sa.text("(CURRENT_TIMESTAMP)"),
                nullable=False,
            ),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("key", name=f"uq_{table_name}_key"),
        )
        op.create_index(f"ix_{table_name}_id", table_name, ["id"], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    for table_name in ("review_snapshots", "stored_secrets"):
        op.drop_index(f"ix_{table_name}_id", table_name=table_name)
        op.drop_table(table_name)
