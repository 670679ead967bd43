"""create scoring ledger

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-19 09:00:00.000000

Creates the driver registry, rule catalog, append-only event log, score
aggregates, rule-application tracker and score history, then seeds the
default rules with INSERT … ON CONFLICT DO NOTHING so re-running never
overwrites tuned points.

The rule values are derived from ``app.core.default_rules``.
Do NOT edit values here directly; update DEFAULT_RULES in that module.
"""

from typing import Sequence, Union

import json
import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "a1b2c3d4e5f6"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Import at migration-generation time so values stay in sync.
from app.core.default_rules import DEFAULT_RULES  # noqa: E402


def upgrade() -> None:
    op.create_table(
        "drivers",
        sa.Column("driver_id", sa.String(64), primary_key=True),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), unique=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now()
        ),
    )

    op.create_table(
        "scoring_rules",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("rule_key", sa.String(100), nullable=False, unique=True),
        sa.Column("rule_name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("points", sa.Integer, nullable=False),
        sa.Column(
            "trigger_condition",
            postgresql.JSONB,
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("is_default", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_by", sa.String(100)),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now()
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()
        ),
    )
    op.create_index(
        "ix_scoring_rules_category_name", "scoring_rules", ["category", "rule_name"]
    )

    op.create_table(
        "scoring_events",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "driver_id",
            sa.String(64),
            sa.ForeignKey("drivers.driver_id"),
            nullable=False,
        ),
        sa.Column("rule_id", sa.Integer, nullable=True),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("event_name", sa.String(200), nullable=False),
        sa.Column("points", sa.Integer, nullable=False),
        sa.Column(
            "details",
            postgresql.JSONB,
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("is_custom", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("applied_by", sa.String(100)),
        sa.Column(
            "timestamp",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("score_after", sa.Integer, nullable=False),
    )
    op.create_index(
        "ix_scoring_events_driver_id_id", "scoring_events", ["driver_id", "id"]
    )
    op.create_index(
        "ix_scoring_events_driver_id_timestamp",
        "scoring_events",
        ["driver_id", "timestamp"],
    )

    op.create_table(
        "driver_scores",
        sa.Column(
            "driver_id",
            sa.String(64),
            sa.ForeignKey("drivers.driver_id"),
            primary_key=True,
        ),
        sa.Column("current_score", sa.Integer, nullable=False),
        sa.Column("base_points", sa.Integer, nullable=False),
        sa.Column("events_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("last_reset", sa.DateTime(timezone=True)),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now()
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()
        ),
    )

    op.create_table(
        "rule_applications",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "rule_id",
            sa.Integer,
            sa.ForeignKey("scoring_rules.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "driver_id",
            sa.String(64),
            sa.ForeignKey("drivers.driver_id"),
            nullable=False,
        ),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("applied_by", sa.String(100)),
        sa.Column(
            "applied_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.UniqueConstraint(
            "rule_id", "driver_id", name="uq_rule_applications_rule_driver"
        ),
    )

    op.create_table(
        "score_history",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "driver_id",
            sa.String(64),
            sa.ForeignKey("drivers.driver_id"),
            nullable=False,
        ),
        sa.Column("period", sa.String(50), nullable=False),
        sa.Column("final_score", sa.Integer, nullable=False),
        sa.Column("events_count", sa.Integer, nullable=False),
        sa.Column(
            "end_date",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index("ix_score_history_driver_id", "score_history", ["driver_id"])

    for rule in DEFAULT_RULES:
        rule_key = rule["rule_key"].replace("'", "''")
        rule_name = rule["rule_name"].replace("'", "''")
        description = rule["description"].replace("'", "''")
        category = rule["category"].replace("'", "''")
        condition_json = json.dumps(rule["trigger_condition"]).replace("'", "''")

        op.execute(
            f"""
            INSERT INTO scoring_rules
                (rule_key, rule_name, description, category, points,
                 trigger_condition, is_active, is_default, created_by)
            VALUES ('{rule_key}', '{rule_name}', '{description}', '{category}',
                    {rule["points"]}, '{condition_json}'::jsonb, true, true, 'system')
            ON CONFLICT (rule_key) DO NOTHING;
            """
        )


def downgrade() -> None:
    op.drop_index("ix_score_history_driver_id", table_name="score_history")
    op.drop_table("score_history")
    op.drop_table("rule_applications")
    op.drop_table("driver_scores")
    op.drop_index("ix_scoring_events_driver_id_timestamp", table_name="scoring_events")
    op.drop_index("ix_scoring_events_driver_id_id", table_name="scoring_events")
    op.drop_table("scoring_events")
    op.drop_index("ix_scoring_rules_category_name", table_name="scoring_rules")
    op.drop_table("scoring_rules")
    op.drop_table("drivers")
