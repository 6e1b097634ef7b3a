"""Publish/subscribe for timer state between contexts.

A context is anything holding a ``SharedTimer``: a window, a dialog, another
running copy of the program.  Every channel speaks the same envelope::

    {"type": "timer-sync", "id": "<hex>", "sender": "<context id>", "payload": {...}}

Delivery is fire-and-forget and receivers replace their state wholesale with
whatever arrives last.  ``LocalChannel`` covers contexts inside one process;
the cross-process flavour lives in ``st.ui.channel`` because it needs Qt.
"""

import uuid
from st.common.logger import log
from st.core.engine import TimerState

CHANNEL_NAME = "study-timer"
MESSAGE_TYPE = "timer-sync"


def build_message(state, sender):
    return {
        "type": MESSAGE_TYPE,
        "id": uuid.uuid4().hex,
        "sender": sender,
        "payload": state.to_dict(),
    }


def parse_message(message):
    """Return ``(id, sender, TimerState)`` for a valid envelope, otherwise None."""
    if not isinstance(message, dict) or message.get("type") != MESSAGE_TYPE:
        log.debug(f"Ignoring non timer-sync message: {message!r}")
        return None
    if "payload" not in message:
        log.debug("Ignoring timer-sync message without payload")
        return None
    try:
        state = TimerState.from_dict(message["payload"])
    except ValueError:
        log.warning("Ignoring timer-sync message with invalid payload", exc_info=True)
        return None
    return message.get("id"), message.get("sender"), state


class Channel:
    """Base channel.  Keeps the handler list; subclasses decide where messages go."""

    def __init__(self, name=CHANNEL_NAME):
        self.name = name
        self._handlers = []
        self._closed = False

    @property
    def closed(self):
        return self._closed

    def subscribe(self, handler):
        if self._closed:
            log.warning(f"Subscribe on closed channel '{self.name}' ignored")
            return
        if handler not in self._handlers:
            self._handlers.append(handler)

    def unsubscribe(self, handler):
        if handler in self._handlers:
            self._handlers.remove(handler)

    def publish(self, state):
        raise NotImplementedError

    def close(self):
        self._handlers.clear()
        self._closed = True

    def _dispatch(self, state):
        for handler in list(self._handlers):
            handler(state)


class LocalChannel(Channel):
    """In-process broadcast.

    Every open ``LocalChannel`` sharing a hub key hears what the others publish;
    the publisher never hears itself.
    """

    _hubs = {}

    def __init__(self, name=CHANNEL_NAME):
        super().__init__(name)
        self.context_id = uuid.uuid4().hex
        self._last_message_id = None
        self._hubs.setdefault(self.hub_key, []).append(self)

    @property
    def hub_key(self):
        return ("local", self.name)

    def peers(self):
        return [ch for ch in self._hubs.get(self.hub_key, []) if ch is not self]

    def publish(self, state):
        if self._closed:
            return None
        message = build_message(state, self.context_id)
        for peer in self.peers():
            peer._receive(message)
        return message

    def close(self):
        if self._closed:
            return
        members = self._hubs.get(self.hub_key, [])
        if self in members:
            members.remove(self)
        if not members:
            self._hubs.pop(self.hub_key, None)
        super().close()

    def _receive(self, message):
        parsed = parse_message(message)
        if parsed is None:
            return
        message_id, sender, state = parsed
        if sender == self.context_id or (message_id is not None and message_id == self._last_message_id):
            return
        self._last_message_id = message_id
        self._dispatch(state)
