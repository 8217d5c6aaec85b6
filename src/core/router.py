"""Path A / path B routing.

Path A (message from a source group): paid groups + pickup-city group + free
group. Path B (message from the free group): paid groups + pickup-city group;
the free group is the source, so it is never echoed back.

Before any target is built the text is screened in a fixed order: blocked
number, not a request, no phone number, rate limit.
"""

from __future__ import annotations

import logging
import random
from typing import Iterable, Optional, TypeVar

from core.classifier import contains_blocked_number, extract_pickup_city, has_phone_number, is_request
from core.models import Rejection, RouteOutcome, RoutePath
from core.scheduler import DeliveryScheduler
from core.state import RelayState

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


def unique(items: Iterable[T]) -> list[T]:
    return list(dict.fromkeys(items))


def fisher_yates_shuffle(items: Iterable[T], rng: random.Random) -> list[T]:
    """Return a uniformly shuffled copy of ``items``."""

    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


class Router:
    def __init__(self, state: RelayState, scheduler: DeliveryScheduler) -> None:
        self._state = state
        self._scheduler = scheduler

    def screen(self, text: str) -> Optional[Rejection]:
        filters = self._state.config.filters
        if contains_blocked_number(text, filters.blocked_numbers):
            return Rejection.BLOCKED_NUMBER
        if not is_request(text, filters.keywords, filters.ignore_terms):
            return Rejection.NOT_REQUEST
        if not has_phone_number(text):
            return Rejection.NO_PHONE
        if not self._state.rate_limiter.allow():
            return Rejection.RATE_LIMITED
        return None

    def build_targets(self, path: RoutePath, city: Optional[str]) -> list[str]:
        """Unique targets for a path, in construction order (paid, city, free)."""

        topology = self._state.config.topology
        targets = list(topology.paid_group_ids)
        if city:
            city_group = topology.city_group(city)
            if city_group:
                targets.append(city_group)
            else:
                LOGGER.warning("No group configured for %s", city)
        if path is RoutePath.A:
            targets.append(topology.free_group_id)
        return unique(targets)

    async def route(self, text: str, path: RoutePath) -> RouteOutcome:
        state = self._state

        rejection = self.screen(text)
        if rejection is not None:
            LOGGER.info("Path %s rejected: %s", path.value, rejection.value)
            return RouteOutcome(path=path, rejection=rejection)

        city = extract_pickup_city(text, state.config.topology.configured_cities)
        targets = fisher_yates_shuffle(self.build_targets(path, city), state.rng)
        LOGGER.info("Path %s targets: %s (city=%s)", path.value, len(targets), city or "none")

        result = await self._scheduler.deliver(targets, text)
        if result.success_count > 0:
            state.rate_limiter.record()
            state.stats.count_path(path)
            state.stats.messages_sent += result.success_count

        state.committed.trim_overflow()

        LOGGER.info(
            "Path %s done: %s/%s delivered | city: %s",
            path.value,
            result.success_count,
            result.total_attempted,
            city or "none",
        )
        return RouteOutcome(
            path=path,
            city=city,
            success_count=result.success_count,
            total_attempted=result.total_attempted,
        )
