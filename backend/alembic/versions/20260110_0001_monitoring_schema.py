"""Initial monitoring schema: users, devices, telemetry, commands, settings."""

from alembic import op
import sqlalchemy as sa


revision = "20260110_0001"
down_revision = None
branch_labels = None
depends_on = None


def _device_fk() -> sa.Column:
    return sa.Column(
        "device_id",
        sa.Integer(),
        sa.ForeignKey("devices.id", ondelete="CASCADE"),
        nullable=False,
    )


def _timestamp() -> sa.Column:
    return sa.Column("timestamp", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False)


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=255), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("first_name", sa.String(length=255), nullable=True),
        sa.Column("last_name", sa.String(length=255), nullable=True),
        sa.Column("profile_image_url", sa.String(length=1024), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"])

    op.create_table(
        "devices",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.String(length=255), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("device_type", sa.String(length=50), nullable=False),
        sa.Column("platform", sa.String(length=50), nullable=False),
        sa.Column("status", sa.String(length=20), server_default="offline", nullable=False),
        sa.Column("last_activity", sa.DateTime(), nullable=True),
        sa.Column("battery", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.CheckConstraint("battery IS NULL OR (battery >= 0 AND battery <= 100)", name="ck_devices_battery_range"),
    )
    op.create_index("ix_devices_id", "devices", ["id"])
    op.create_index("ix_devices_user_id", "devices", ["user_id"])

    op.create_table(
        "locations",
        sa.Column("id", sa.Integer(), primary_key=True),
        _device_fk(),
        sa.Column("latitude", sa.Text(), nullable=False),
        sa.Column("longitude", sa.Text(), nullable=False),
        sa.Column("address", sa.Text(), nullable=True),
        _timestamp(),
    )
    op.create_index("ix_locations_device_id", "locations", ["device_id"])
    op.create_index("ix_locations_timestamp", "locations", ["timestamp"])

    op.create_table(
        "calls",
        sa.Column("id", sa.Integer(), primary_key=True),
        _device_fk(),
        sa.Column("phone_number", sa.String(length=64), nullable=False),
        sa.Column("call_type", sa.String(length=20), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=True),
        _timestamp(),
    )
    op.create_index("ix_calls_device_id", "calls", ["device_id"])
    op.create_index("ix_calls_timestamp", "calls", ["timestamp"])

    op.create_table(
        "messages",
        sa.Column("id", sa.Integer(), primary_key=True),
        _device_fk(),
        sa.Column("phone_number", sa.String(length=64), nullable=False),
        sa.Column("message_type", sa.String(length=20), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        _timestamp(),
    )
    op.create_index("ix_messages_device_id", "messages", ["device_id"])
    op.create_index("ix_messages_timestamp", "messages", ["timestamp"])

    op.create_table(
        "photos",
        sa.Column("id", sa.Integer(), primary_key=True),
        _device_fk(),
        sa.Column("photo_url", sa.Text(), nullable=False),
        sa.Column("source", sa.String(length=50), nullable=True),
        _timestamp(),
    )
    op.create_index("ix_photos_device_id", "photos", ["device_id"])
    op.create_index("ix_photos_timestamp", "photos", ["timestamp"])

    op.create_table(
        "recordings",
        sa.Column("id", sa.Integer(), primary_key=True),
        _device_fk(),
        sa.Column("recording_url", sa.Text(), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=True),
        _timestamp(),
    )
    op.create_index("ix_recordings_device_id", "recordings", ["device_id"])
    op.create_index("ix_recordings_timestamp", "recordings", ["timestamp"])

    op.create_table(
        "commands",
        sa.Column("id", sa.Integer(), primary_key=True),
        _device_fk(),
        sa.Column("command_type", sa.String(length=50), nullable=False),
        sa.Column("status", sa.String(length=20), server_default="pending", nullable=False),
        sa.Column("executed_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
    )
    op.create_index("ix_commands_device_id", "commands", ["device_id"])
    op.create_index("ix_commands_created_at", "commands", ["created_at"])

    op.create_table(
        "settings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.String(length=255), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("stealth_mode", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("notifications_enabled", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("tracking_interval", sa.Integer(), server_default="15", nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.UniqueConstraint("user_id", name="uq_settings_user_id"),
    )
    op.create_index("ix_settings_user_id", "settings", ["user_id"])


def downgrade() -> None:
    for table in ("settings", "commands", "recordings", "photos", "messages", "calls", "locations"):
        op.drop_table(table)
    op.drop_table("devices")
    op.drop_table("users")
