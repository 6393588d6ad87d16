"""
VS Code Extension Integration Helper
Status bar payloads and debounced recomputation on buffer changes.
"""

import logging
import threading
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

from co2de_meter.calculator import EnergyCalculator
from co2de_meter.models import EnergyMetrics
from co2de_meter.session import GenerationGate
from co2de_meter.utils import round_half_up

logger = logging.getLogger(__name__)

UpdateCallback = Callable[[Hashable, Dict[str, Any]], None]


def status_bar_payload(metrics: EnergyMetrics) -> Dict[str, Any]:
    """
    What the editor shows for the active buffer: estimated CO2 and complexity.
    """
    return {
        "text": f"$(leaf) {metrics.carbon}g CO2",
        "tooltip": f"Estimated Carbon Footprint for this file (complexity {metrics.complexity}x)",
        "estimatedCO2": metrics.carbon,
        "complexity": metrics.complexity,
        "command": "co2de.analyze",
    }


def information_message(metrics: EnergyMetrics) -> str:
    """Message for the explicit analyze command."""
    score = max(1, min(10, int(round_half_up(10 - metrics.complexity))))
    return f"CO2DE Analysis: {metrics.carbon} {metrics.co2_unit} | Score: {score}/10"


class BufferTracker:
    """
    Recomputes metrics for editor buffers after a quiet period.
    Each change starts a new generation; a computation whose generation has
    been superseded by a later change is dropped.
    """

    def __init__(
        self,
        calculator: Optional[EnergyCalculator] = None,
        on_update: Optional[UpdateCallback] = None,
        debounce_sec: float = 0.3,
        region: Optional[str] = None,
        hardware: Optional[str] = None,
    ):
        self.calculator = calculator or EnergyCalculator()
        self.on_update = on_update
        self.debounce_sec = debounce_sec
        self.region = region
        self.hardware = hardware
        self.gate = GenerationGate()
        self.latest: Dict[Hashable, Dict[str, Any]] = {}
        self._lock = threading.Lock()
        self._timers: Dict[Hashable, threading.Timer] = {}
        self._pending: Dict[Hashable, Tuple[int, str, str]] = {}

    def buffer_changed(self, key: Hashable, file_name: str, content: str) -> int:
        """Record a change; returns the generation issued for it."""
        with self._lock:
            generation = self.gate.begin(key)
            self._pending[key] = (generation, file_name, content)
            timer = self._timers.pop(key, None)
            if timer is not None:
                timer.cancel()
            if self.debounce_sec > 0:
                timer = threading.Timer(self.debounce_sec, self.flush, args=(key,))
                timer.daemon = True
                self._timers[key] = timer
                timer.start()
        if self.debounce_sec <= 0:
            self.flush(key)
        return generation

    def flush(self, key: Hashable) -> Optional[Dict[str, Any]]:
        """Compute the pending change for key now."""
        with self._lock:
            pending = self._pending.pop(key, None)
            timer = self._timers.pop(key, None)
        if timer is not None:
            timer.cancel()
        if pending is None:
            return None
        generation, file_name, content = pending
        return self._compute(key, generation, file_name, content)

    def _compute(self, key: Hashable, generation: int, file_name: str, content: str) -> Optional[Dict[str, Any]]:
        if not self.gate.is_current(key, generation):
            return None
        metrics = self.calculator.compute(
            len(content.encode("utf-8")), file_name, content, self.region, self.hardware
        )
        if not self.gate.accept(key, generation):
            return None
        payload = status_bar_payload(metrics)
        self.latest[key] = payload
        if self.on_update is not None:
            self.on_update(key, payload)
        return payload

    def close(self) -> None:
        with self._lock:
            timers = list(self._timers.values())
            self._timers.clear()
            self._pending.clear()
        for timer in timers:
            timer.cancel()
