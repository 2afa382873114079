import logging
from typing import List
from uuid import uuid4
from sqlalchemy import select, insert, delete, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from db.schema import item_types, items
from image_audit.errors import StoreError
from image_audit.models import ItemType, Item, NewItem

logger = logging.getLogger(__name__)

class ItemImageStore:
    """
    Data access for the item_types catalog and the items table.
    Every call is a single awaited round-trip; writes commit immediately.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def fetch_item_types(self) -> List[ItemType]:
        query = select(
            item_types.c.id, item_types.c.name, item_types.c.base_image_url
        ).order_by(item_types.c.name)
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to fetch item types: {e}") from e
        return [ItemType(**row) for row in result.mappings().all()]

    async def insert_item(self, new_item: NewItem) -> Item:
        values = {"id": str(uuid4()), **new_item.model_dump()}
        stmt = insert(items).values(**values).returning(
            items.c.id,
            items.c.user_id,
            items.c.item_type_id,
            items.c.level,
            items.c.is_styled,
            items.c.current_stats,
            items.c.material_combo_hash,
            items.c.generated_image_url,
            items.c.image_generation_status,
        )
        try:
            result = await self.db.execute(stmt)
            row = result.mappings().one()
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StoreError(f"Failed to insert item: {e}") from e
        logger.debug(f"Inserted item {row['id']}")
        return Item(**row)

    async def delete_item(self, item_id: str) -> None:
        try:
            await self.db.execute(delete(items).where(items.c.id == item_id))
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StoreError(f"Failed to delete item {item_id}: {e}") from e

    async def count_items(self) -> int:
        try:
            result = await self.db.execute(select(func.count()).select_from(items))
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to count items: {e}") from e
        return result.scalar_one()
