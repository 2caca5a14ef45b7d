"""Polling based contract event subscriptions."""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any

from .clock import AsyncioClock, Clock
from .constants import DEFAULT_EVENT_PAGE_SIZE, DEFAULT_EVENT_POLL_INTERVAL
from .exceptions import ValidationError
from .network import NetworkClient
from .types import ContractEvent, EventCallback, Subscription, SubscriptionId
from .utils import generate_subscription_id, validate_event_handle

logger = logging.getLogger(__name__)


class EventSubscriptionEngine:
    """Registry of subscriptions served by one cooperative polling loop.

    The loop starts with the first subscription and stops when the registry
    empties. Subscribing immediately records where the stream stands, so only
    events after that point are delivered. Each tick fetches events newer
    than the cursor and delivers them in ascending sequence order.
    """

    def __init__(
        self,
        network: NetworkClient,
        *,
        poll_interval: float = DEFAULT_EVENT_POLL_INTERVAL,
        clock: Clock | None = None,
        page_size: int = DEFAULT_EVENT_PAGE_SIZE,
    ) -> None:
        if poll_interval <= 0:
            raise ValidationError(
                "poll_interval must be positive", field="poll_interval", value=poll_interval
            )
        self._network = network
        self._poll_interval = poll_interval
        self._clock: Clock = clock or AsyncioClock()
        self._page_size = page_size
        self._subscriptions: dict[SubscriptionId, Subscription] = {}
        self._task: asyncio.Task[None] | None = None
        self._priming: dict[SubscriptionId, asyncio.Task[None]] = {}

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------
    def subscribe(self, event_handle: str, callback: EventCallback) -> SubscriptionId:
        handle = validate_event_handle(event_handle)
        if not callable(callback):
            raise ValidationError("callback must be callable", field="callback", value=callback)

        subscription = Subscription(
            id=generate_subscription_id(),
            event_handle=handle,
            callback=callback,
        )
        self._subscriptions[subscription.id] = subscription
        logger.debug("Subscribed %s to %s", subscription.id, handle)

        self._start_priming(subscription)
        self._ensure_polling()
        return subscription.id

    def unsubscribe(self, subscription_id: SubscriptionId) -> None:
        if self._subscriptions.pop(subscription_id, None) is None:
            return
        self._cancel_priming(subscription_id)

        logger.debug("Unsubscribed %s", subscription_id)
        if not self._subscriptions:
            self.stop()

    def unsubscribe_all(self) -> None:
        count = len(self._subscriptions)
        self._subscriptions.clear()
        for subscription_id in list(self._priming):
            self._cancel_priming(subscription_id)
        self.stop()
        if count:
            logger.info("Removed %d event subscriptions", count)

    def get_subscription_count(self) -> int:
        return len(self._subscriptions)

    def has_subscription(self, subscription_id: SubscriptionId) -> bool:
        return subscription_id in self._subscriptions

    def subscriptions(self) -> list[Subscription]:
        return list(self._subscriptions.values())

    # ------------------------------------------------------------------
    # Polling task
    # ------------------------------------------------------------------
    @property
    def polling_task(self) -> asyncio.Task[None] | None:
        return self._task

    @property
    def is_polling(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task[None] | None:
        """Start the polling loop on the running event loop."""

        if self.is_polling:
            return self._task
        if not self._subscriptions:
            return None

        self._task = asyncio.get_running_loop().create_task(self._run())
        return self._task

    def stop(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()

    def _ensure_polling(self) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; polling begins once start() is awaited in one")
            return
        self.start()

    def _start_priming(self, subscription: Subscription) -> None:
        """Record where the stream stands now so older events count as history."""

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(self._prime(subscription))
            return

        task = loop.create_task(self._prime(subscription))
        self._priming[subscription.id] = task
        task.add_done_callback(lambda _task: self._priming.pop(subscription.id, None))

    def _cancel_priming(self, subscription_id: SubscriptionId) -> None:
        task = self._priming.pop(subscription_id, None)
        if task is not None and not task.done():
            task.cancel()

    async def _prime(self, subscription: Subscription) -> None:
        try:
            raw_events = await self._network.get_events(
                subscription.event_handle, after=None, limit=self._page_size
            )
        except Exception as exc:
            logger.warning(
                "Reading the position of %s for %s failed, retrying next tick: %s",
                subscription.event_handle,
                subscription.id,
                exc,
            )
            return

        if not self._is_live(subscription):
            return

        subscription.prime(_parse_events(raw_events))
        logger.debug(
            "Subscription %s starts after sequence %s",
            subscription.id,
            subscription.last_seen_sequence,
        )

    async def _run(self) -> None:
        logger.info("Event polling started (interval=%ss)", self._poll_interval)
        try:
            while self._subscriptions:
                await self._clock.sleep(self._poll_interval)
                if not self._subscriptions:
                    break
                await self.poll_once()
        finally:
            if self._task is asyncio.current_task():
                self._task = None
            logger.info("Event polling stopped")

    async def poll_once(self) -> int:
        """Run one polling pass over every live subscription.

        Returns the number of events delivered.
        """

        delivered = 0
        for subscription in list(self._subscriptions.values()):
            if not self._is_live(subscription):
                continue

            if not subscription.primed:
                pending = self._priming.get(subscription.id)
                if pending is not None:
                    await asyncio.wait({pending})
                if not self._is_live(subscription):
                    continue
                if not subscription.primed:
                    await self._prime(subscription)
                    continue

            try:
                raw_events = await self._network.get_events(
                    subscription.event_handle,
                    after=subscription.last_seen_sequence,
                    limit=self._page_size,
                )
            except Exception as exc:
                logger.warning(
                    "Fetching %s for %s failed, retrying next tick: %s",
                    subscription.event_handle,
                    subscription.id,
                    exc,
                )
                continue

            # Results for subscriptions removed mid-fetch are discarded
            if not self._is_live(subscription):
                continue

            delivered += await self._deliver(subscription, _parse_events(raw_events))

        return delivered

    async def _deliver(self, subscription: Subscription, events: list[ContractEvent]) -> int:
        delivered = 0
        for event in sorted(events, key=lambda item: item.sequence):
            if not self._is_live(subscription):
                break
            if not subscription.is_new(event):
                continue

            try:
                result = subscription.callback(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception(
                    "Callback for %s failed on sequence %s",
                    subscription.id,
                    event.sequence_number,
                )

            subscription.advance(event.sequence_number)
            delivered += 1
        return delivered

    def _is_live(self, subscription: Subscription) -> bool:
        return self._subscriptions.get(subscription.id) is subscription


def _parse_events(raw_events: list[Any]) -> list[ContractEvent]:
    events = []
    for raw in raw_events or []:
        try:
            event = raw if isinstance(raw, ContractEvent) else ContractEvent.from_dict(raw)
            event.sequence  # validates the sequence number
        except (AttributeError, TypeError, ValueError) as exc:
            logger.warning("Skipping malformed event %r: %s", raw, exc)
            continue
        events.append(event)
    return events
