"""
Dedicated handlers for feeds flagged with a special handler type.
"""
from typing import Dict, Optional, Type

from .kijiji import KijijiHandler, ListingItem

HANDLERS: Dict[str, Type[KijijiHandler]] = {
    KijijiHandler.handler_type: KijijiHandler,
}


def get_handler(handler_type: str, **kwargs) -> Optional[KijijiHandler]:
    """Instantiate the handler registered for ``handler_type``, or None."""
    handler_cls = HANDLERS.get((handler_type or "").upper())
    if handler_cls is None:
        return None
    return handler_cls(**kwargs)


__all__ = ["HANDLERS", "KijijiHandler", "ListingItem", "get_handler"]
