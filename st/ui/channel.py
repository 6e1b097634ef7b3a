"""Cross-process timer channel on top of a watched JSON file.

Publishing reaches in-process peers directly (it is a ``LocalChannel``) and
also drops the envelope into ``<directory>/<name>.json``.  Every process
watches that file with ``QFileSystemWatcher`` and applies envelopes written by
some *other* process.  When the directory can't be used the channel keeps
working in-process only.
"""

import json
import os
import tempfile
import uuid
from pathlib import Path
from PySide6.QtCore import QFileSystemWatcher
from st.common.logger import log
from st.core import config
from st.core.sync import LocalChannel, build_message, parse_message

# Shared by every FileChannel in this process, so a process never re-applies its own broadcasts.
PROCESS_ID = uuid.uuid4().hex


class FileChannel(LocalChannel):

    def __init__(self, name, directory, process_id=PROCESS_ID):
        self.directory = Path(directory)
        self.path = self.directory / f"{name}.json"
        self.process_id = process_id
        super().__init__(name)
        self._watcher = None
        self._last_file_id = None

        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError:
            log.warning(f"Channel directory '{self.directory}' unavailable, channel '{name}' is in-process only.", exc_info=True)
            return

        self._watcher = QFileSystemWatcher()
        self._watcher.fileChanged.connect(self._on_file_changed)
        self._watcher.directoryChanged.connect(self._on_file_changed)
        if not self._watcher.addPath(str(self.directory)):
            log.warning(f"Could not watch '{self.directory}', channel '{name}' is in-process only.")
            self._watcher = None
            return
        self._watch_file()
        # Whatever is already in the file was sent before we existed
        self._last_file_id = self._read_file_id()

    @property
    def hub_key(self):
        return ("file", str(self.path), self.process_id)

    @property
    def cross_process(self):
        return self._watcher is not None

    def publish(self, state):
        if self._closed:
            return None
        message = build_message(state, self.process_id)
        for peer in self.peers():
            peer._receive(message)
        if self._watcher is not None:
            self._write(message)
        return message

    def close(self):
        if self._closed:
            return
        if self._watcher is not None:
            self._watcher.fileChanged.disconnect(self._on_file_changed)
            self._watcher.directoryChanged.disconnect(self._on_file_changed)
            self._watcher.deleteLater()
            self._watcher = None
        super().close()

    def _receive(self, message):
        # In-process delivery: the sender is this process, so don't filter on it
        parsed = parse_message(message)
        if parsed is None:
            return
        message_id, _, state = parsed
        if message_id is not None and message_id == self._last_message_id:
            return
        self._last_message_id = message_id
        self._dispatch(state)

    def _write(self, message):
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=self.directory)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(message, f)
            os.replace(tmp_name, self.path)
            tmp_name = None
            self._last_file_id = message["id"]
            self._watch_file()
        except OSError:
            log.warning(f"Failed to broadcast timer state on '{self.path}'.", exc_info=True)
        finally:
            if tmp_name is not None:
                try: os.remove(tmp_name)
                except OSError: pass

    # Replacing the file drops the old inode from the watcher, so re-arm after every change.
    def _watch_file(self):
        if self._watcher is not None and self.path.exists() and str(self.path) not in self._watcher.files():
            self._watcher.addPath(str(self.path))

    def _read_message(self):
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError:
            return None
        except (json.JSONDecodeError, UnicodeDecodeError, OSError):
            log.debug(f"Unreadable channel file '{self.path}', skipping.", exc_info=True)
            return None

    def _read_file_id(self):
        message = self._read_message()
        return message.get("id") if isinstance(message, dict) else None

    def _on_file_changed(self, _path=None):
        if self._closed:
            return
        self._watch_file()
        message = self._read_message()
        if message is None:
            return
        parsed = parse_message(message)
        if parsed is None:
            return
        message_id, sender, state = parsed
        if sender == self.process_id or message_id == self._last_file_id:
            return
        self._last_file_id = message_id
        log.debug(f"Channel '{self.name}' received state from process {sender}")
        self._dispatch(state)


# Opens the channel every view should use. Falls back to a plain in-process channel when no cross-process one can
# be set up.
def open_channel(name, directory=None):
    directory = directory if directory is not None else config.CHANNEL_DIR
    channel = FileChannel(name, directory)
    if not channel.cross_process:
        channel.close()
        log.warning(f"Timer channel '{name}' degraded to single-process sync.")
        return LocalChannel(name)
    return channel
