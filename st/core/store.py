import json
import os
import tempfile
from pathlib import Path
from st.common.logger import log
from st.core.engine import TimerState

# Fixed key the timer state is stored under. The JSON file takes its name from it.
STORAGE_KEY = "study_timer_state_v1"


# Minimal storage contract for the timer. load() returns None when there is nothing usable, save() never raises.
class TimerStore:

    def load(self):
        raise NotImplementedError

    def save(self, state):
        raise NotImplementedError


# Keeps the state in memory only. Used by tests and as a last resort when there's no writable data folder.
class MemoryTimerStore(TimerStore):

    def __init__(self, state=None):
        self._data = None if state is None else state.to_dict()

    def load(self):
        if self._data is None:
            return None
        try:
            return TimerState.from_dict(dict(self._data))
        except ValueError:
            log.warning("In-memory timer state failed validation, treating as absent.", exc_info=True)
            return None

    def save(self, state):
        self._data = state.to_dict()


# Durable store backed by a single JSON file. Shared by every open window and every running copy of the program,
# last writer wins.
class JsonTimerStore(TimerStore):

    def __init__(self, path):
        self.path = Path(path)

    # Reads and validates the stored state. Missing, unreadable or malformed data all come back as None.
    def load(self):
        if not self.path.exists():
            log.info(f"No stored timer state at '{self.path}', starting fresh.")
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            state = TimerState.from_dict(data)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError, ValueError):
            log.warning(f"Stored timer state at '{self.path}' is unusable, treating as absent.", exc_info=True)
            return None
        log.info(f"Loaded timer state from '{self.path}': {state}")
        return state

    # Best-effort write. A failed save only costs durability, the caller's in-memory state is still right.
    def save(self, state):
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(state.to_dict(), f)
            os.replace(tmp_name, self.path)
            tmp_name = None
            log.debug(f"Saved timer state to '{self.path}': {state}")
        except (OSError, TypeError, ValueError):
            log.warning(f"Failed to save timer state to '{self.path}'.", exc_info=True)
        finally:
            if tmp_name is not None:
                try: os.remove(tmp_name)
                except OSError: pass
