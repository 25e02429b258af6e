"""
View and purchase history
Product id lists persisted as JSON strings in a key-value slot
"""
import json
import logging
import threading
from typing import Dict, List, Optional, Protocol

from storefront_reco.services.utils.constants import PURCHASE_HISTORY_KEY, VIEW_HISTORY_KEY
from storefront_reco.services.utils.parsers import parse_id_list

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """String key-value storage (browser local storage, redis, ...)"""

    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class InMemoryKeyValueStore:
    """Process-local KeyValueStore"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def __len__(self) -> int:
        return len(self._data)


class _IdListHistory:
    """Most-recent-first, deduplicated id list per user slot"""

    def __init__(self, store: KeyValueStore, key: str, max_items: Optional[int] = None):
        self.store = store
        self.key = key
        self.max_items = max_items
        self._lock = threading.Lock()

    def slot(self, user_id: Optional[int] = None) -> str:
        """Storage key; anonymous visitors share the bare key"""
        return self.key if user_id is None else f"{self.key}:{user_id}"

    def get(self, user_id: Optional[int] = None) -> List[str]:
        return parse_id_list(self.store.get_item(self.slot(user_id)))

    def _push(self, product_id: str, user_id: Optional[int] = None) -> List[str]:
        with self._lock:
            ids = [pid for pid in self.get(user_id) if pid != product_id]
            ids.insert(0, product_id)
            if self.max_items is not None:
                ids = ids[:self.max_items]
            self.store.set_item(self.slot(user_id), json.dumps(ids))
        return ids

    def clear(self, user_id: Optional[int] = None) -> None:
        self.store.remove_item(self.slot(user_id))


class ViewHistoryTracker(_IdListHistory):
    """
    Recently viewed products

    Re-viewing a product moves it to the front; the list is capped
    at `max_items` (oldest dropped).
    """

    def __init__(self, store: KeyValueStore, max_items: int = 10, key: str = VIEW_HISTORY_KEY):
        super().__init__(store, key, max_items=max_items)

    def track(self, product_id: str, user_id: Optional[int] = None) -> List[str]:
        ids = self._push(product_id, user_id)
        logger.debug("Tracked view product_id=%s user_id=%s history=%s", product_id, user_id, ids)
        return ids


class PurchaseHistoryTracker(_IdListHistory):
    """Purchased products, most recent first, uncapped"""

    def __init__(self, store: KeyValueStore, key: str = PURCHASE_HISTORY_KEY):
        super().__init__(store, key)

    def record(self, product_id: str, user_id: Optional[int] = None) -> List[str]:
        ids = self._push(product_id, user_id)
        logger.debug("Recorded purchase product_id=%s user_id=%s", product_id, user_id)
        return ids
