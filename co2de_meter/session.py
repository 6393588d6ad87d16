"""
Generation gate: only the most recently issued computation for a key is accepted.
"""

import logging
import threading
from typing import Dict, Hashable

logger = logging.getLogger(__name__)


class GenerationGate:
    """
    Hands out increasing generation ids per key. A result is accepted only
    if its generation is still the newest one issued for that key.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._generations: Dict[Hashable, int] = {}

    def begin(self, key: Hashable = None) -> int:
        with self._lock:
            generation = self._generations.get(key, 0) + 1
            self._generations[key] = generation
            return generation

    def current(self, key: Hashable = None) -> int:
        with self._lock:
            return self._generations.get(key, 0)

    def is_current(self, key: Hashable, generation: int) -> bool:
        return self.current(key) == generation

    def accept(self, key: Hashable, generation: int) -> bool:
        if self.is_current(key, generation):
            return True
        logger.warning("Discarding stale result for %r (generation %d)", key, generation)
        return False
