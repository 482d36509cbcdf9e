from __future__ import annotations

import itertools
import logging
import os
import threading
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


class AggregationError(RuntimeError):
    pass


def resolve_target(path: str) -> str:
    return os.path.normpath(os.path.abspath(path))


@dataclass(frozen=True)
class PassToken:
    target: str
    serial: int


class AggregationState:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._serials = itertools.count(1)
        self._counters: dict[str, int] = {}
        self._open: set[PassToken] = set()
        self._contributions: dict[str, list[dict[str, Any]]] = {}

    def start_pass(self, target: str) -> PassToken:
        key = resolve_target(target)
        with self._lock:
            count = self._counters.get(key, 0) + 1
            self._counters[key] = count
            token = PassToken(target=key, serial=next(self._serials))
            self._open.add(token)
        logger.info("pass start target=%s pending=%s serial=%s", key, count, token.serial)
        return token

    def complete_pass(self, token: PassToken) -> bool:
        with self._lock:
            if token not in self._open:
                raise AggregationError(
                    f"pass {token.serial} for {token.target} is not open"
                )
            self._open.discard(token)
            count = self._counters[token.target] - 1
            self._counters[token.target] = count
        final = count == 0
        logger.info(
            "pass complete target=%s pending=%s serial=%s final=%s",
            token.target,
            count,
            token.serial,
            final,
        )
        return final

    def pending(self, target: str) -> int:
        with self._lock:
            return self._counters.get(resolve_target(target), 0)

    def is_tracked(self, target: str) -> bool:
        with self._lock:
            return resolve_target(target) in self._counters

    def contribute(self, target: str, import_map: dict[str, Any]) -> None:
        key = resolve_target(target)
        with self._lock:
            self._contributions.setdefault(key, []).append(import_map)

    def drain(self, target: str) -> list[dict[str, Any]]:
        key = resolve_target(target)
        with self._lock:
            return self._contributions.pop(key, [])

    def targets(self) -> dict[str, int]:
        with self._lock:
            return dict(self._counters)
