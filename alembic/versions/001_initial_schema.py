"""Initial schema — events, rounds, participants, hints, matches, assignments.

Revision ID: 001_initial
Revises:
Create Date: 2025-10-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    ]


def _event_fk() -> sa.Column:
    return sa.Column(
        "event_id",
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey("events.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )


def upgrade() -> None:
    # ── 1. events ───────────────────────────────────────────────────
    op.create_table(
        "events",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("code", sa.String, unique=True, index=True, nullable=False),
        sa.Column("title", sa.String, nullable=False),
        sa.Column(
            "status",
            sa.String,
            server_default="draft",
            nullable=False,
            comment="draft / waiting_for_matching / live / ended",
        ),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("location", sa.String, nullable=True),
        sa.Column(
            "matching_created",
            sa.Boolean,
            server_default="false",
            nullable=False,
        ),
        *_timestamps(),
    )

    # ── 2. rounds ───────────────────────────────────────────────────
    op.create_table(
        "rounds",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        _event_fk(),
        sa.Column("name", sa.String, nullable=False),
        sa.Column(
            "visible_levels",
            postgresql.JSONB,
            nullable=False,
            comment="Hint levels revealed, e.g. [\"H1\", \"H2\"]",
        ),
        sa.Column("is_active", sa.Boolean, server_default="false", nullable=False),
        sa.Column("order", sa.Integer, nullable=False),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )

    # ── 3. participants ─────────────────────────────────────────────
    op.create_table(
        "participants",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        _event_fk(),
        sa.Column("display_name", sa.String, nullable=False),
        sa.Column("lang", sa.String, nullable=False),
        sa.Column("consent", sa.Boolean, nullable=False),
        sa.Column("submitted_levels", postgresql.JSONB, nullable=True),
        sa.Column("profile_emoji", sa.String, nullable=True),
        sa.Column("is_matched", sa.Boolean, server_default="false", nullable=False),
        sa.Column(
            "match_id",
            postgresql.UUID(as_uuid=True),
            nullable=True,
            comment="Match completed by this participant",
        ),
        *_timestamps(),
    )

    # ── 4. hints ────────────────────────────────────────────────────
    op.create_table(
        "hints",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "participant_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("participants.id", ondelete="CASCADE"),
            index=True,
            nullable=False,
        ),
        sa.Column(
            "event_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("events.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("level", sa.String, nullable=False, comment="H1-H6"),
        sa.Column("payload", postgresql.JSONB, nullable=False),
        sa.Column("pii_flag", sa.Boolean, nullable=False),
        sa.Column("status", sa.String, nullable=False, comment="ok / flagged / hidden"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.UniqueConstraint("participant_id", "level", name="uq_participant_hint_level"),
    )

    # ── 5. matches ──────────────────────────────────────────────────
    op.create_table(
        "matches",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        _event_fk(),
        sa.Column(
            "participants",
            postgresql.JSONB,
            nullable=False,
            comment="Ordered participant ids (2 or 3)",
        ),
        sa.Column("type", sa.String, nullable=False, comment="pair / trio"),
        *_timestamps(),
    )

    # ── 6. match_assignments ────────────────────────────────────────
    op.create_table(
        "match_assignments",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        _event_fk(),
        sa.Column(
            "match_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("matches.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "participant_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("participants.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "target_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("participants.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "status",
            sa.String,
            server_default="pending",
            nullable=False,
            comment="pending / found / completed",
        ),
        sa.Column("found_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint(
            "event_id", "participant_id", name="uq_assignment_participant"
        ),
    )


def downgrade() -> None:
    # Drop in reverse order (children / dependents first).
    op.drop_table("match_assignments")
    op.drop_table("matches")
    op.drop_table("hints")
    op.drop_table("participants")
    op.drop_table("rounds")
    op.drop_table("events")
