"""
Rate limit en memoria por ventana fija (por identificador, p. ej. IP).

Se construye una instancia en el startup (ver `app.main`) y se inyecta vía
`app.state`; para varias instancias del servicio habría que cambiar el
almacenamiento por uno compartido detrás de la misma interfaz `allow()`.
"""
from __future__ import annotations

import threading
from dataclasses import dataclass
from time import time
from typing import Dict, List, Protocol


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    remaining: int
    retry_after_seconds: int


class RateLimiter(Protocol):
    def check(self, identifier: str, now: float | None = None) -> RateLimitDecision:
        ...


class FixedWindowRateLimiter:
    """Cuenta intentos por identificador; descarta timestamps más viejos que la ventana.

    limit: máximo de intentos dentro de la ventana
    window_seconds: ventana de tiempo en segundos
    """

    def __init__(self, limit: int = 6, window_seconds: int = 180) -> None:
        self.limit = limit
        self.window_seconds = window_seconds
        self._buckets: Dict[str, List[float]] = {}
        self._lock = threading.Lock()
        self._last_sweep = 0.0

    def check(self, identifier: str, now: float | None = None) -> RateLimitDecision:
        """Registra el intento si cabe en la ventana y devuelve la decisión."""
        ts = time() if now is None else now
        with self._lock:
            if ts - self._last_sweep >= self.window_seconds:
                self._sweep(ts)
            # elimina timestamps fuera de ventana
            q = [t for t in self._buckets.get(identifier, ()) if ts - t < self.window_seconds]
            if len(q) >= self.limit:
                self._buckets[identifier] = q
                retry_after = int(self.window_seconds - (ts - q[0])) + 1
                return RateLimitDecision(allowed=False, remaining=0, retry_after_seconds=retry_after)
            q.append(ts)
            self._buckets[identifier] = q
            return RateLimitDecision(allowed=True, remaining=self.limit - len(q), retry_after_seconds=0)

    def _sweep(self, ts: float) -> None:
        """Descarta identificadores sin intentos dentro de la ventana (llamar con el lock tomado)."""
        stale = [k for k, q in self._buckets.items() if not q or ts - q[-1] >= self.window_seconds]
        for k in stale:
            del self._buckets[k]
        self._last_sweep = ts

    def allow(self, identifier: str, now: float | None = None) -> bool:
        return self.check(identifier, now=now).allowed

    def reset(self) -> None:
        """Limpia los buckets (útil en tests o reinicios)."""
        with self._lock:
            self._buckets.clear()
