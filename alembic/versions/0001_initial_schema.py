"""initial schema"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "initial_schema"
down_revision = None
branch_labels = None
depends_on = None

ORDER_STATUSES = (
    "pending",
    "preparing",
    "ready",
    "delivered",
    "completed",
    "cancelled",
    "payment_pending",
    "payment_failed",
)


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "restaurant",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("logo_url", sa.String(512)),
        sa.Column("tagline", sa.String(256)),
        sa.Column("address", sa.String(512)),
        sa.Column("phone", sa.String(32)),
        sa.Column("whatsapp_number", sa.String(32)),
        sa.Column("email", sa.String(128)),
        sa.Column("opening_hours", sa.String(128)),
        sa.Column("social_links", sa.JSON, nullable=False),
        sa.Column("is_gst_enabled", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("gst_number", sa.String(32)),
        *_timestamps(),
    )

    op.create_table(
        "categories",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("slug", sa.String(128), nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_categories_slug", "categories", ["slug"], unique=True)

    op.create_table(
        "dishes",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("category_id", sa.Integer, nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("image_url", sa.String(512)),
        sa.Column("is_veg", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("is_available", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("tags", sa.JSON, nullable=False),
        sa.Column("variants", sa.JSON, nullable=False),
        sa.Column("customizations", sa.JSON, nullable=False),
        sa.Column(
            "discount_type",
            sa.Enum("none", "percentage", "fixed", name="discount_type"),
            nullable=False,
            server_default="none",
        ),
        sa.Column("discount_value", sa.Numeric(10, 2), nullable=False, server_default="0"),
        *_timestamps(),
    )
    op.create_index("ix_dishes_name", "dishes", ["name"])
    op.create_index("ix_dishes_category_id", "dishes", ["category_id"])

    op.create_table(
        "section_items",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column(
            "section_type",
            sa.Enum("offers", "todaysSpecial", "whatsNew", name="section_type"),
            nullable=False,
        ),
        sa.Column("title", sa.String(128), nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("image_url", sa.String(512)),
        sa.Column("price", sa.Numeric(10, 2)),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("priority", sa.Integer, nullable=False, server_default="0"),
        sa.Column("coupon_code", sa.String(64)),
        sa.Column("discount_type", sa.String(16)),
        sa.Column("discount_value", sa.Numeric(10, 2)),
        *_timestamps(),
    )
    op.create_index("ix_section_items_section_type", "section_items", ["section_type"])
    op.create_index("ix_section_items_coupon_code", "section_items", ["coupon_code"])

    op.create_table(
        "orders",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("order_number", sa.String(64), nullable=False),
        sa.Column("customer_name", sa.String(128)),
        sa.Column("customer_phone", sa.String(32)),
        sa.Column("customer_address", sa.Text),
        sa.Column("subtotal", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("discount", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("discount_type", sa.String(16)),
        sa.Column("discount_value", sa.Numeric(10, 2)),
        sa.Column("coupon_code", sa.String(64)),
        sa.Column("tax", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("total", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("status", sa.Enum(*ORDER_STATUSES, name="order_status"), nullable=False, server_default="pending"),
        sa.Column(
            "order_type",
            sa.Enum("dine-in", "takeaway", "delivery", name="order_type"),
            nullable=False,
            server_default="delivery",
        ),
        sa.Column("table_number", sa.String(16)),
        sa.Column("notes", sa.Text),
        sa.Column("created_by", sa.String(128), nullable=False, server_default="admin"),
        sa.Column("is_paid", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("is_viewed", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("payment_method", sa.Enum("cash", "card", "upi", "online", name="payment_method")),
        sa.Column("payment_transaction_id", sa.String(64)),
        sa.Column("payment_details", sa.JSON),
        *_timestamps(),
    )
    op.create_index("ix_orders_order_number", "orders", ["order_number"], unique=True)
    op.create_index("ix_orders_status", "orders", ["status"])
    op.create_index("ix_orders_payment_transaction_id", "orders", ["payment_transaction_id"])

    op.create_table(
        "order_items",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("order_id", sa.Integer, sa.ForeignKey("orders.id", ondelete="CASCADE"), nullable=False),
        sa.Column("dish_id", sa.Integer, nullable=False),
        sa.Column("dish_name", sa.String(128), nullable=False),
        sa.Column("quantity", sa.Integer, nullable=False, server_default="1"),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("original_price", sa.Numeric(10, 2)),
        sa.Column("dish_discount_type", sa.String(16)),
        sa.Column("dish_discount_value", sa.Numeric(10, 2)),
        sa.Column("is_veg", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("notes", sa.Text),
        sa.Column("variant_id", sa.String(64)),
        sa.Column("variant_name", sa.String(128)),
        sa.Column("selected_customizations", sa.JSON, nullable=False),
    )

    op.create_table(
        "error_logs",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("stack", sa.Text),
        sa.Column("url", sa.String(1024)),
        sa.Column("user_agent", sa.String(512)),
        sa.Column("user_id", sa.String(128)),
        sa.Column("additional_info", sa.JSON),
        *_timestamps(),
    )

    op.create_table(
        "admin_devices",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("token", sa.String(512), nullable=False, unique=True),
        sa.Column("user_id", sa.String(128)),
        *_timestamps(),
    )
    op.create_index("ix_admin_devices_user_id", "admin_devices", ["user_id"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("admin_devices")
    op.drop_table("error_logs")
    op.drop_table("order_items")
    op.drop_table("orders")
    op.drop_table("section_items")
    op.drop_table("dishes")
    op.drop_table("categories")
    op.drop_table("restaurant")
    for enum_name in ("payment_method", "order_type", "order_status", "section_type", "discount_type"):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
