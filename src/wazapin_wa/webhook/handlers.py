import inspect
import threading
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, Union

from ..types import WebhookEventKind
from .events import AccountEvent, MessageEvent, StatusEvent, WebhookEvent

EventCallback = Union[Callable[[WebhookEvent], Any], Callable[[WebhookEvent], Awaitable[Any]]]


class EventHandlerRegistry:
    """Subscribers for message, status and account webhook events.

    A kind may have several subscribers. They run in subscription order and
    the last non-None result is the webhook response. The fallback runs only
    for kinds with no subscriber.
    """

    def __init__(self) -> None:
        self._subscribers: Dict[WebhookEventKind, List[EventCallback]] = {kind: [] for kind in WebhookEventKind}
        self._fallback: Optional[EventCallback] = None
        self._lock = threading.RLock()

    def subscribe(self, kind: Union[WebhookEventKind, str], callback: EventCallback) -> "EventHandlerRegistry":
        with self._lock:
            self._subscribers[WebhookEventKind(kind)].append(callback)
        return self

    def unsubscribe(self, kind: Union[WebhookEventKind, str], callback: Optional[EventCallback] = None) -> None:
        """Drop one callback, or every subscriber of ``kind`` when none is given."""
        with self._lock:
            subscribers = self._subscribers[WebhookEventKind(kind)]
            if callback is None:
                subscribers.clear()
            elif callback in subscribers:
                subscribers.remove(callback)

    def register_default(self, callback: Optional[EventCallback]) -> "EventHandlerRegistry":
        with self._lock:
            self._fallback = callback
        return self

    def on_message(self, callback: Callable[[MessageEvent], Any]) -> "EventHandlerRegistry":
        return self.subscribe(WebhookEventKind.MESSAGE, callback)

    def on_status(self, callback: Callable[[StatusEvent], Any]) -> "EventHandlerRegistry":
        return self.subscribe(WebhookEventKind.STATUS, callback)

    def on_account(self, callback: Callable[[AccountEvent], Any]) -> "EventHandlerRegistry":
        return self.subscribe(WebhookEventKind.ACCOUNT, callback)

    def callbacks_for(self, kind: WebhookEventKind) -> Tuple[EventCallback, ...]:
        with self._lock:
            subscribers = tuple(self._subscribers[kind])
            if subscribers:
                return subscribers
            return (self._fallback,) if self._fallback is not None else ()

    def dispatch(self, event: WebhookEvent) -> Any:
        callbacks = self.callbacks_for(event.kind)
        if any(inspect.iscoroutinefunction(callback) for callback in callbacks):
            raise RuntimeError(f"{event.kind.value} event has async subscribers, use adispatch()")
        result = None
        for callback in callbacks:
            outcome = callback(event)
            if outcome is not None:
                result = outcome
        return result

    async def adispatch(self, event: WebhookEvent) -> Any:
        result = None
        for callback in self.callbacks_for(event.kind):
            outcome = callback(event)
            if inspect.isawaitable(outcome):
                outcome = await outcome
            if outcome is not None:
                result = outcome
        return result
