from st.common.logger import log
from st.core import engine
from st.core.engine import TimerState
from st.core.store import MemoryTimerStore
from st.core.sync import LocalChannel
from st.util.misc import format_hms


# One view's handle on the shared stopwatch. Every window/dialog gets its own SharedTimer, all pointed at the same
# store and channel name, and they converge by replacing state with whatever was committed last.
class SharedTimer:

    def __init__(self, store=None, channel=None, clock=engine.now_ms, on_stop=None):
        self._store = store if store is not None else MemoryTimerStore()
        self._channel = channel if channel is not None else LocalChannel()
        self._clock = clock
        self.on_stop = on_stop
        self._listeners = []
        self._high_water_ms = 0
        self._closed = False

        stored = self._store.load()
        self._state = stored if stored is not None else TimerState()
        self._channel.subscribe(self._on_remote_state)
        log.debug(f"Initialized shared timer on channel '{self._channel.name}' with state {self._state}")

    #region === Reading ===

    @property
    def state(self):
        return self._state

    @property
    def running(self):
        return self._state.running

    # Never reports less than it did before for the same state, so a clock stepping backwards freezes the display
    # instead of rewinding it.
    @property
    def elapsed_ms(self):
        value = engine.elapsed(self._state, self._clock())
        if self._state.running and value < self._high_water_ms:
            return self._high_water_ms
        self._high_water_ms = value
        return value

    @property
    def elapsed_sec(self):
        return self.elapsed_ms // 1000

    #endregion === Reading ===

    #region === Actions ===

    def toggle(self):
        new_state = engine.toggle(self._state, self._clock())
        log.debug(f"{'Started' if new_state.running else 'Paused'} timer: {new_state}")
        self._commit(new_state)

    def reset(self):
        new_state = engine.reset(self._state, self._clock())
        log.debug(f"Reset timer: {new_state}")
        self._commit(new_state)

    # Stops the timer and hands the formatted total to on_stop. Returns the total in whole seconds.
    def stop(self):
        new_state, total_seconds = engine.stop(self._state, self._clock())
        log.info(f"Stopped timer at {format_hms(total_seconds)}")
        self._commit(new_state)
        if self.on_stop is not None:
            self.on_stop(format_hms(total_seconds))
        return total_seconds

    # Re-save and re-broadcast right now, so anything opened next hydrates with the current values.
    def sync_now(self):
        self._store.save(self._state)
        self._channel.publish(self._state)

    # Unload path, make sure the latest state hit the disk.
    def flush(self):
        self._store.save(self._state)

    def close(self):
        if self._closed:
            return
        self._closed = True
        self._channel.unsubscribe(self._on_remote_state)
        self._channel.close()
        self._listeners.clear()
        log.debug(f"Closed shared timer on channel '{self._channel.name}'")

    #endregion === Actions ===

    #region === Listeners ===

    def add_listener(self, callback):
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify(self):
        for callback in list(self._listeners):
            callback(self._state)

    #endregion === Listeners ===

    def _replace(self, state):
        self._state = state
        self._high_water_ms = 0

    def _commit(self, state):
        self._replace(state)
        self._store.save(state)
        self._channel.publish(state)
        self._notify()

    # Another context committed. Take its state as-is; it already saved, and echoing it back would only loop.
    def _on_remote_state(self, state):
        if self._closed:
            return
        log.debug(f"Received timer state from another context: {state}")
        self._replace(state)
        self._notify()
