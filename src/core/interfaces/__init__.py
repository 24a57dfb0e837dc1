"""Core interfaces/abstractions.

Why:
- Defines contracts (Protocol) that concrete adapters implement.
- Inverts dependencies: the Core depends on abstractions, not on httpx or
  on a particular UI loop.
"""

from core.interfaces.delivery import DeliveryContext
from core.interfaces.presenter import Presenter
from core.interfaces.transport import Transport

__all__ = ["DeliveryContext", "Presenter", "Transport"]
