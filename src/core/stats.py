"""Counters exposed to the reporting surface."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from core.models import Rejection, RoutePath


@dataclass
class RelayStats:
    received: int = 0
    admitted: int = 0
    committed: int = 0
    released: int = 0
    path_a_processed: int = 0
    path_b_processed: int = 0
    messages_sent: int = 0
    send_successes: int = 0
    send_failures: int = 0
    send_retries: int = 0
    human_pauses: int = 0
    routing_errors: int = 0
    reconnects: int = 0
    rejections: Counter = field(default_factory=Counter)

    def reject(self, reason: Rejection) -> None:
        self.rejections[reason] += 1

    def count_path(self, path: RoutePath) -> None:
        if path is RoutePath.A:
            self.path_a_processed += 1
        else:
            self.path_b_processed += 1

    def as_dict(self) -> dict:
        data = {
            name: getattr(self, name)
            for name in self.__dataclass_fields__
            if name != "rejections"
        }
        data["rejections"] = {reason.value: self.rejections.get(reason, 0) for reason in Rejection}
        return data
