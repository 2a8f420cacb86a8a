"""
External effects: value transfers and calls against targets
"""

import logging
import threading
from collections import defaultdict
from typing import Callable, Dict

logger = logging.getLogger(__name__)

# handler(sender, value, payload) -> truthy on success
EffectHandler = Callable[[str, int, bytes], bool]


class EffectDispatcher:
    """Routes executed transactions to their targets.

    Targets with a registered handler behave like contracts; any other
    target is a plain account that accepts the transfer.
    """

    def __init__(self):
        self._handlers: Dict[str, EffectHandler] = {}
        self._received = defaultdict(int)
        self._lock = threading.Lock()

    def register(self, target: str, handler: EffectHandler) -> None:
        self._handlers[target] = handler

    def unregister(self, target: str) -> None:
        self._handlers.pop(target, None)

    def received(self, target: str) -> int:
        """Total value successfully delivered to target"""
        with self._lock:
            return self._received[target]

    def dispatch(self, sender: str, target: str, value: int, payload: bytes) -> bool:
        handler = self._handlers.get(target)

        if handler is not None:
            try:
                ok = bool(handler(sender, value, payload))
            except Exception as e:
                logger.warning(f"Call to {target[:8]}... raised {type(e).__name__}: {e}")
                return False
            if not ok:
                logger.warning(f"Call to {target[:8]}... rejected")
                return False

        with self._lock:
            self._received[target] += value
        return True
