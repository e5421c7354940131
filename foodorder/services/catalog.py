"""
Catalog Service

Menu item CRUD plus the one-time default menu seed.
"""

import logging
from typing import Any, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from foodorder.models import MenuItem
from foodorder.services.seed_data import DEFAULT_MENU

logger = logging.getLogger(__name__)

MENU_FIELDS = ("name", "category", "price", "rating", "image", "description")


class CatalogService:
    """Catalog operations bound to one database session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_items(self, category: Optional[str] = None) -> list[MenuItem]:
        """Return menu items in insertion order, optionally for one category."""
        query = select(MenuItem).order_by(MenuItem.seq)
        if category:
            query = query.where(MenuItem.category == category)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def categories(self) -> list[str]:
        """Distinct category labels in the order they first appear."""
        result = await self.db.execute(
            select(MenuItem.category, func.min(MenuItem.seq).label("first_seq"))
            .where(MenuItem.category.is_not(None))
            .group_by(MenuItem.category)
            .order_by("first_seq")
        )
        return [row.category for row in result]

    async def add_item(self, fields: dict[str, Any]) -> MenuItem:
        """Persist a menu item as submitted; unknown keys are dropped."""
        item = MenuItem(**{k: v for k, v in fields.items() if k in MENU_FIELDS})
        self.db.add(item)
        await self.db.commit()
        await self.db.refresh(item)

        logger.info(f"Menu item added: {item.name} ({item.id})")
        return item

    async def delete_item(self, item_id: str) -> None:
        """
        Delete a menu item.

        A missing id is not an error: callers get the same success either way.
        """
        result = await self.db.execute(delete(MenuItem).where(MenuItem.id == item_id))
        await self.db.commit()

        if result.rowcount:
            logger.info(f"Menu item deleted: {item_id}")
        else:
            logger.debug(f"Delete requested for unknown menu item {item_id}")

    async def seed_if_empty(self) -> int:
        """
        Insert the default menu when the catalog has no items.

        Count and insert share one transaction. Returns the number of items added.
        """
        async with self.db.begin():
            count = await self.db.scalar(select(func.count(MenuItem.seq)))
            if count:
                logger.debug(f"Catalog already has {count} items, skipping seed")
                return 0
            self.db.add_all([MenuItem(**entry) for entry in DEFAULT_MENU])

        logger.info(f"Seeded catalog with {len(DEFAULT_MENU)} default items")
        return len(DEFAULT_MENU)
