"""Full-size stopwatch dialog.  Has its own SharedTimer on the host's store and channel name."""

from PySide6.QtCore import Qt
from PySide6.QtGui import QFont
from PySide6.QtWidgets import QDialog, QLabel, QVBoxLayout
from st.core.timer import SharedTimer
from st.ui.widgets import TimerDisplay, build_controls, toggle_label


class StudyTimerDialog(QDialog):

    def __init__(self, parent, store, channel, settings, on_stop=None, clock=None):
        super().__init__(parent)
        self.setWindowTitle("Study Timer")
        if settings.get("always_on_top"):
            self.setWindowFlags(self.windowFlags() | Qt.WindowStaysOnTopHint)

        kwargs = {"clock": clock} if clock is not None else {}
        self.timer = SharedTimer(store=store, channel=channel, on_stop=on_stop, **kwargs)
        self.timer.add_listener(self._on_state)

        lay = QVBoxLayout(self)
        lay.setContentsMargins(24, 24, 24, 24)
        lay.setSpacing(12)

        title = QLabel("Study Timer")
        title.setAlignment(Qt.AlignCenter)
        title.setFont(QFont("", 14))
        lay.addWidget(title)

        self.display = TimerDisplay(
            self.timer,
            interval_ms=settings.get("refresh_interval_ms", 200),
            theme=settings.get("theme", "Light"),
            point_size=48,
        )
        self.display.refreshed.connect(self._on_refreshed)
        lay.addWidget(self.display)

        controls, self._buttons = build_controls(
            self.timer,
            on_toggle=self.timer.toggle,
            on_reset=self.timer.reset,
            on_stop=self._on_stop,
            on_minimize=self.hide,
        )
        lay.addWidget(controls, 0, Qt.AlignCenter)
        self._on_refreshed(self.timer.elapsed_sec)

    def _on_state(self, state):
        self._buttons["toggle"].setText(toggle_label(state.running))

    def _on_refreshed(self, seconds):
        self._buttons["reset"].setEnabled(seconds > 0)

    def _on_stop(self):
        self.timer.stop()
        self.hide()

    # The window's close button minimizes too; the host reuses this dialog until it shuts down itself.
    def closeEvent(self, event):
        event.ignore()
        self.hide()

    # Tears the dialog's own context down. The stopwatch itself carries on in every other context.
    def shutdown(self):
        self.display.detach()
        self.timer.flush()
        self.timer.close()
