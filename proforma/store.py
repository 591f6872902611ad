"""Deal lookup capability injected into the by-id entry points"""
from typing import Dict, Iterable, Optional, Protocol

from .models import Deal
from .normalize import deal_from_dict

class DealReader(Protocol):
    def get_deal(self, deal_id: str) -> Optional[Deal]:
        ...

class InMemoryDealStore:
    """Dict-backed DealReader; records may be Deal objects or raw dicts"""

    def __init__(self, deals: Iterable = ()):
        self._deals: Dict[str, Deal] = {}
        for deal in deals:
            self.put(deal)

    def put(self, deal) -> Deal:
        if isinstance(deal, dict):
            deal = deal_from_dict(deal)
        self._deals[deal.id] = deal
        return deal

    def get_deal(self, deal_id: str) -> Optional[Deal]:
        return self._deals.get(deal_id)

    def __len__(self):
        return len(self._deals)
