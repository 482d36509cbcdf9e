from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

ImportMapHook = Callable[[dict[str, Any]], dict[str, Any] | None]


@dataclass
class WaterfallHook:
    name: str
    taps: list[ImportMapHook] = field(default_factory=list)

    def tap(self, callback: ImportMapHook) -> None:
        self.taps.append(callback)

    def call(self, import_map: dict[str, Any]) -> dict[str, Any]:
        current = import_map
        for callback in self.taps:
            result = callback(current)
            if result is not None:
                current = result
        return current


@dataclass
class ManifestHooks:
    before_emit: WaterfallHook = field(default_factory=lambda: WaterfallHook("before_emit"))
    after_emit: WaterfallHook = field(default_factory=lambda: WaterfallHook("after_emit"))
