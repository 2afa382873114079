from sqlalchemy import (
    MetaData, Table, Column, String, Integer, Boolean, DateTime, ForeignKey, JSON, Uuid
)
from sqlalchemy.sql import func

metadata = MetaData()

# Ids are uuid columns in the hosted database; keep them as strings on the Python side
UUID_STR = Uuid(as_uuid=False)

# PROFILES
profiles = Table(
    "profiles",
    metadata,
    Column("id", UUID_STR, primary_key=True),
    Column("username", String, unique=True, nullable=False),
    Column("created_at", DateTime(timezone=True), server_default=func.now())
)

# ITEM TYPES (Catalog)
item_types = Table(
    "itemtypes",
    metadata,
    Column("id", UUID_STR, primary_key=True),
    Column("name", String, nullable=False),
    Column("base_image_url", String, nullable=True), # Canonical unstyled image
    Column("created_at", DateTime(timezone=True), server_default=func.now())
)

# ITEMS (Instances)
items = Table(
    "items",
    metadata,
    Column("id", UUID_STR, primary_key=True),
    Column("user_id", UUID_STR, ForeignKey("profiles.id"), nullable=False),
    Column("item_type_id", UUID_STR, ForeignKey("itemtypes.id"), nullable=False),
    Column("level", Integer, server_default="1"),
    Column("is_styled", Boolean, server_default="0"),
    Column("current_stats", JSON(none_as_null=True), nullable=True),
    Column("material_combo_hash", String, nullable=True),
    Column("generated_image_url", String, nullable=True),
    Column("image_generation_status", String, nullable=True),
    Column("created_at", DateTime(timezone=True), server_default=func.now())
)
