import pytest
from unittest.mock import AsyncMock, MagicMock
from sqlalchemy.dialects import postgresql
from sqlalchemy.dialects.postgresql import asyncpg

from conftest import BUCKET, CHECK_USER_ID, seed, type_id
from image_audit.errors import StoreError
from image_audit.models import NewItem
from image_audit.store import ItemImageStore


@pytest.mark.asyncio
async def test_fetch_item_types_ordered_by_name(db):
    await seed(db, [
        (type_id(3), "Sword", f"{BUCKET}sword.png"),
        (type_id(1), "Axe", None),
        (type_id(2), "Iron Helm", f"{BUCKET}iron_helm.png"),
    ])

    rows = await ItemImageStore(db).fetch_item_types()

    assert [r.name for r in rows] == ["Axe", "Iron Helm", "Sword"]
    assert rows[0].base_image_url is None
    assert rows[2].base_image_url == f"{BUCKET}sword.png"


@pytest.mark.asyncio
async def test_insert_and_delete_item(db):
    await seed(db, [(type_id(1), "Sword", f"{BUCKET}sword.png")])
    store = ItemImageStore(db)

    created = await store.insert_item(NewItem(
        user_id=CHECK_USER_ID, item_type_id=type_id(1), generated_image_url=f"{BUCKET}sword.png"
    ))

    assert created.id
    assert created.level == 1
    assert created.is_styled is False
    assert created.current_stats is None
    assert created.generated_image_url == f"{BUCKET}sword.png"
    assert await store.count_items() == 1

    await store.delete_item(created.id)
    assert await store.count_items() == 0


@pytest.mark.asyncio
async def test_insert_for_unknown_user_raises_store_error(db):
    await seed(db, [(type_id(1), "Sword", f"{BUCKET}sword.png")], with_user=False)
    store = ItemImageStore(db)

    with pytest.raises(StoreError):
        await store.insert_item(NewItem(user_id=CHECK_USER_ID, item_type_id=type_id(1)))

    # Session is usable again after the rollback
    assert await store.count_items() == 0


@pytest.mark.asyncio
async def test_fetch_reads_hosted_itemtypes_table():
    mock_db = AsyncMock()
    mock_db.execute.return_value = MagicMock()

    await ItemImageStore(mock_db).fetch_item_types()

    query = mock_db.execute.call_args.args[0]
    sql = str(query.compile(dialect=postgresql.dialect()))
    assert "FROM itemtypes ORDER BY itemtypes.name" in sql


@pytest.mark.asyncio
async def test_insert_binds_uuid_and_json_columns_for_asyncpg():
    mock_db = AsyncMock()
    mock_db.execute.return_value = MagicMock()
    mock_db.execute.return_value.mappings.return_value.one.return_value = {
        "id": type_id(9), "user_id": CHECK_USER_ID, "item_type_id": type_id(1),
    }

    await ItemImageStore(mock_db).insert_item(NewItem(
        user_id=CHECK_USER_ID, item_type_id=type_id(1), current_stats={"attack": 3}
    ))

    stmt = mock_db.execute.call_args.args[0]
    values_clause = str(stmt.compile(dialect=asyncpg.dialect())).split("VALUES", 1)[1]
    # Only the three plain text columns may be bound as VARCHAR
    assert values_clause.count("::VARCHAR") == 3
    assert "::JSON" in values_clause
