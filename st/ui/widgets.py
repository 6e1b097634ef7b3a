"""Timer widgets shared by the main window bar and the full-size dialog.

``TimerDisplay`` is the presentation loop: a label that repaints the elapsed
time while the timer runs.  It only ever reads from the ``SharedTimer``.
"""

from PySide6.QtCore import Qt, QTimer, Signal
from PySide6.QtGui import QFont
from PySide6.QtWidgets import QHBoxLayout, QLabel, QPushButton, QWidget
from st.ui.theme import THEMES
from st.util.misc import format_hms


class TimerDisplay(QLabel):
    """HH:MM:SS label driven by a QTimer that only runs while the timer runs and the label is on screen."""

    refreshed = Signal(int)  # elapsed seconds just painted

    def __init__(self, timer, interval_ms=200, theme="Light", point_size=24, parent=None):
        super().__init__(parent)
        self._timer = timer
        self._theme = THEMES.get(theme, THEMES["Light"])
        self.setAlignment(Qt.AlignCenter)
        font = QFont()
        font.setPointSize(point_size)
        font.setStyleHint(QFont.Monospace)
        self.setFont(font)

        self._loop = QTimer(self)
        self._loop.setInterval(interval_ms)
        self._loop.timeout.connect(self.refresh)

        self._painted_running = None  # running flag the current stylesheet was built for

        self._timer.add_listener(self._on_state)
        self.refresh()

    @property
    def is_looping(self):
        return self._loop.isActive()

    def refresh(self):
        seconds = self._timer.elapsed_sec
        self.setText(format_hms(seconds))
        running = self._timer.running
        if running != self._painted_running:
            color = self._theme["running_text"] if running else self._theme["text"]
            self.setStyleSheet(f"color: {color};")
            self._painted_running = running
        self.refreshed.emit(seconds)

    def detach(self):
        self._loop.stop()
        self._timer.remove_listener(self._on_state)

    def _on_state(self, _state):
        self.refresh()
        self._sync_loop()

    def _sync_loop(self):
        if self._timer.running and self.isVisible():
            if not self._loop.isActive():
                self._loop.start()
        else:
            self._loop.stop()

    def showEvent(self, event):
        super().showEvent(event)
        self.refresh()
        self._sync_loop()

    def hideEvent(self, event):
        super().hideEvent(event)
        self._loop.stop()


def toggle_label(running):
    return "Pause" if running else "Start"


# Builds the row of timer buttons. Returns (container, widget_dict); keys that weren't asked for are simply absent.
def build_controls(timer, on_toggle, on_reset, on_stop=None, on_expand=None, on_minimize=None):
    container = QWidget()
    lay = QHBoxLayout(container)
    lay.setContentsMargins(0, 0, 0, 0)
    lay.setSpacing(6)

    widgets = {}

    toggle_btn = QPushButton(toggle_label(timer.running))
    toggle_btn.setToolTip("Start or pause the timer")
    toggle_btn.clicked.connect(on_toggle)
    lay.addWidget(toggle_btn)
    widgets["toggle"] = toggle_btn

    if on_stop is not None:
        stop_btn = QPushButton("Stop")
        stop_btn.setToolTip("Stop and log the session")
        stop_btn.clicked.connect(on_stop)
        lay.addWidget(stop_btn)
        widgets["stop"] = stop_btn

    reset_btn = QPushButton("Reset")
    reset_btn.setToolTip("Reset the timer to zero")
    reset_btn.clicked.connect(on_reset)
    lay.addWidget(reset_btn)
    widgets["reset"] = reset_btn

    if on_expand is not None:
        expand_btn = QPushButton("Expand")
        expand_btn.setToolTip("Open the full-size timer")
        expand_btn.clicked.connect(on_expand)
        lay.addWidget(expand_btn)
        widgets["expand"] = expand_btn

    if on_minimize is not None:
        minimize_btn = QPushButton("Minimize")
        minimize_btn.setToolTip("Hide the timer, it keeps running")
        minimize_btn.clicked.connect(on_minimize)
        lay.addWidget(minimize_btn)
        widgets["minimize"] = minimize_btn

    return container, widgets
