import sys
from PySide6.QtCore import Qt, QEvent, QTimer
from PySide6.QtWidgets import (
    QApplication,
    QHBoxLayout,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)
from st.common.logger import log
from st.core import config
from st.core.store import JsonTimerStore
from st.core.timer import SharedTimer
from st.ui.channel import open_channel
from st.ui.log_dialog import StudyLogDialog
from st.ui.theme import build_stylesheet
from st.ui.timer_dialog import StudyTimerDialog
from st.ui.widgets import TimerDisplay, build_controls, toggle_label


# ---------------------------------------------------------------------------
# Main window
# ---------------------------------------------------------------------------

# Host page: compact timer bar plus the "Add study" entry point. Stopping the timer from anywhere lands in the log
# dialog with the stopped duration filled in.
class MainWindow(QMainWindow):

    def __init__(self, store=None, channel_factory=None, settings=None, clock=None):
        super().__init__()
        self.setWindowTitle("Study Timer")

        self.settings = settings if settings is not None else config.load_settings()
        if self.settings["always_on_top"]:
            self.setWindowFlags(self.windowFlags() | Qt.WindowStaysOnTopHint)

        self._store = store if store is not None else JsonTimerStore(config.STATE_PATH)
        self._channel_factory = channel_factory or (lambda: open_channel(self.settings["channel_name"]))
        self._clock = clock
        kwargs = {"clock": clock} if clock is not None else {}
        self.timer = SharedTimer(
            store=self._store,
            channel=self._channel_factory(),
            on_stop=self.open_log_dialog,
            **kwargs,
        )
        self.timer.add_listener(self._on_state)
        self.timer_dialog = None
        self.log_dialog = None

        # -- Build UI --
        central = QWidget()
        self.setCentralWidget(central)
        lay = QVBoxLayout(central)
        lay.setContentsMargins(12, 12, 12, 12)
        lay.setSpacing(8)

        bar = QWidget()
        bar_lay = QHBoxLayout(bar)
        bar_lay.setContentsMargins(0, 0, 0, 0)
        self.display = TimerDisplay(
            self.timer,
            interval_ms=self.settings["refresh_interval_ms"],
            theme=self.settings["theme"],
        )
        controls, self._buttons = build_controls(
            self.timer,
            on_toggle=self.timer.toggle,
            on_reset=self._on_reset,
            on_stop=self.timer.stop,
            on_expand=self.open_timer_dialog,
        )
        bar_lay.addWidget(self.display, 1)
        bar_lay.addWidget(controls)
        lay.addWidget(bar)

        self._add_btn = QPushButton("Add study")
        self._add_btn.clicked.connect(lambda: self.open_log_dialog("00:00:00"))
        lay.addWidget(self._add_btn)

        self.setStyleSheet(build_stylesheet(self.settings["theme"]))
        QTimer.singleShot(0, self.adjustSize)

    # ------------------------------------------------------------------ #
    #  Timer actions                                                       #
    # ------------------------------------------------------------------ #

    def _on_state(self, state):
        self._buttons["toggle"].setText(toggle_label(state.running))

    def _on_reset(self):
        if self.settings["confirm_reset"] and self.timer.elapsed_sec > 0:
            if QMessageBox.question(self, "Confirm", "Reset the timer to zero?") != QMessageBox.Yes:
                return
        self.timer.reset()

    def open_timer_dialog(self):
        # Push the current state first so the dialog hydrates with it
        self.timer.sync_now()
        if self.timer_dialog is None:
            kwargs = {"clock": self._clock} if self._clock is not None else {}
            self.timer_dialog = StudyTimerDialog(
                self,
                store=self._store,
                channel=self._channel_factory(),
                settings=self.settings,
                on_stop=self.open_log_dialog,
                **kwargs,
            )
        self.timer_dialog.show()
        self.timer_dialog.raise_()
        self.timer_dialog.activateWindow()
        return self.timer_dialog

    def open_log_dialog(self, duration):
        log.info(f"Opening study log with duration {duration}")
        self.log_dialog = StudyLogDialog(self, initial_duration=duration)
        self.log_dialog.open()
        return self.log_dialog

    # ------------------------------------------------------------------ #
    #  Window events                                                       #
    # ------------------------------------------------------------------ #

    # Coming back to the window shouldn't wait for the next tick to show the right time.
    def changeEvent(self, event):
        if event.type() == QEvent.ActivationChange and self.isActiveWindow():
            self.display.refresh()
        super().changeEvent(event)

    def closeEvent(self, event):
        if self.timer_dialog is not None:
            self.timer_dialog.shutdown()
        self.display.detach()
        self.timer.flush()
        self.timer.close()
        event.accept()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main():
    app = QApplication(sys.argv)
    window = MainWindow()
    window.show()
    sys.exit(app.exec())
