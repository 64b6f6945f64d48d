"""Wishlist aggregate (CQRS) — products a user is watching, one list per user."""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, HasMany, Identifier, Integer

from storefront.domain import storefront
from storefront.errors import ItemNotFoundError
from storefront.wishlist.events import (
    ProductUnwishlisted,
    ProductWishlisted,
    WishlistCleared,
    WishlistNotificationsUpdated,
)


@storefront.entity(part_of="Wishlist")
class WishlistEntry:
    product_id = Identifier(required=True)
    added_at = DateTime()
    notify_price_drops = Boolean(default=True)
    notify_back_in_stock = Boolean(default=True)


@storefront.aggregate
class Wishlist:
    user_id = Identifier(identifier=True, required=True)
    entries = HasMany(WishlistEntry)
    product_count = Integer(default=0)
    last_modified = DateTime()

    @classmethod
    def create(cls, user_id):
        return cls(user_id=user_id, product_count=0, last_modified=datetime.now(UTC))

    def entry_for(self, product_id) -> WishlistEntry | None:
        return next((e for e in self.entries if str(e.product_id) == str(product_id)), None)

    def _touch(self):
        self.product_count = len(self.entries)
        self.last_modified = datetime.now(UTC)

    def add_product(self, product_id) -> bool:
        """Add a product; a product already on the list is left as it is."""
        if self.entry_for(product_id) is not None:
            return False

        now = datetime.now(UTC)
        self.add_entries(WishlistEntry(product_id=product_id, added_at=now))
        self._touch()
        self.raise_(ProductWishlisted(user_id=str(self.user_id), product_id=str(product_id), added_at=now))
        return True

    def remove_product(self, product_id):
        entry = self.entry_for(product_id)
        if entry is None:
            return
        self.remove_entries(entry)
        self._touch()
        self.raise_(ProductUnwishlisted(user_id=str(self.user_id), product_id=str(product_id)))

    def clear(self):
        for entry in list(self.entries):
            self.remove_entries(entry)
        self._touch()
        self.raise_(WishlistCleared(user_id=str(self.user_id)))

    def update_notifications(self, product_id, price_drops=None, back_in_stock=None):
        entry = self.entry_for(product_id)
        if entry is None:
            raise ItemNotFoundError(product_id, container="wishlist")

        if price_drops is not None:
            entry.notify_price_drops = price_drops
        if back_in_stock is not None:
            entry.notify_back_in_stock = back_in_stock
        self.last_modified = datetime.now(UTC)

        self.raise_(
            WishlistNotificationsUpdated(
                user_id=str(self.user_id),
                product_id=str(product_id),
                notify_price_drops=entry.notify_price_drops,
                notify_back_in_stock=entry.notify_back_in_stock,
            )
        )
