"""
Shopping cart: local state until the order is submitted.
"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class CartLine:
    food_id: str
    name: str
    price: float
    quantity: int = 1
    image: Optional[str] = None

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


class Cart:
    """Menu items the customer intends to order, keyed by item id."""

    def __init__(self):
        self._lines: dict[str, CartLine] = {}

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self):
        return iter(self._lines.values())

    @property
    def is_empty(self) -> bool:
        return not self._lines

    @property
    def total(self) -> float:
        return round(sum(line.line_total for line in self._lines.values()), 2)

    def add(self, item: dict[str, Any]) -> CartLine:
        """Add one unit of a menu item; repeated adds bump the quantity."""
        food_id = item["_id"]
        line = self._lines.get(food_id)
        if line:
            line.quantity += 1
        else:
            line = CartLine(
                food_id=food_id,
                name=item["name"],
                price=float(item.get("price") or 0),
                image=item.get("image"),
            )
            self._lines[food_id] = line
        return line

    def remove(self, food_id: str) -> None:
        self._lines.pop(food_id, None)

    def update_quantity(self, food_id: str, delta: int) -> None:
        """Change a line's quantity; dropping to zero removes the line."""
        line = self._lines.get(food_id)
        if line is None:
            return
        line.quantity += delta
        if line.quantity <= 0:
            self.remove(food_id)

    def clear(self) -> None:
        self._lines.clear()

    def to_order_items(self) -> list[dict[str, Any]]:
        return [
            {
                "foodId": line.food_id,
                "name": line.name,
                "price": line.price,
                "quantity": line.quantity,
            }
            for line in self._lines.values()
        ]
