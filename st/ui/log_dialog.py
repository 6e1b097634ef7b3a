"""Form for logging one study session, usually pre-filled from a stopped timer."""

from datetime import date, timedelta
from PySide6.QtCore import QDate, Qt
from PySide6.QtWidgets import (
    QComboBox,
    QDateEdit,
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QHBoxLayout,
    QLineEdit,
    QMessageBox,
    QPlainTextEdit,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)
from st.common.logger import log
from st.core import config
from st.util.misc import hms_to_minutes, parse_hms

CATEGORIES = [
    ("theory", "Theory"),
    ("review", "Review"),
    ("exercise", "Questions"),
    ("reading", "Law reading"),
    ("case_law", "Case law"),
]

DAY_CHOICES = ["Today", "Yesterday", "Other day"]


class StudyLogDialog(QDialog):

    def __init__(self, parent=None, initial_duration="00:00:00"):
        super().__init__(parent)
        self.setWindowTitle("Add study")
        self.setModal(True)
        self.saved_path = None

        outer = QVBoxLayout(self)
        form = QFormLayout()

        # Day picker, custom date only shows for "Other day"
        day_row = QWidget()
        day_lay = QHBoxLayout(day_row)
        day_lay.setContentsMargins(0, 0, 0, 0)
        self.day_combo = QComboBox()
        self.day_combo.addItems(DAY_CHOICES)
        self.date_edit = QDateEdit(QDate.currentDate())
        self.date_edit.setCalendarPopup(True)
        self.date_edit.setDisplayFormat("yyyy-MM-dd")
        self.date_edit.setVisible(False)
        self.day_combo.currentIndexChanged.connect(
            lambda i: self.date_edit.setVisible(DAY_CHOICES[i] == "Other day"))
        day_lay.addWidget(self.day_combo)
        day_lay.addWidget(self.date_edit)
        form.addRow("Date", day_row)

        self.category_combo = QComboBox()
        self.category_combo.addItem("Select a category", "")
        for value, label in CATEGORIES:
            self.category_combo.addItem(label, value)
        form.addRow("Category", self.category_combo)

        self.subject_edit = QLineEdit()
        self.subject_edit.setPlaceholderText("Subject")
        form.addRow("Subject", self.subject_edit)

        self.duration_edit = QLineEdit(initial_duration or "00:00:00")
        self.duration_edit.setPlaceholderText("HH:MM:SS")
        form.addRow("Duration", self.duration_edit)

        self.content_edit = QLineEdit()
        form.addRow("Content", self.content_edit)

        self.right_spin = self._counter()
        self.wrong_spin = self._counter()
        questions = QWidget()
        q_lay = QHBoxLayout(questions)
        q_lay.setContentsMargins(0, 0, 0, 0)
        q_lay.addWidget(self.right_spin)
        q_lay.addWidget(self.wrong_spin)
        form.addRow("Right / wrong", questions)

        self.page_start_spin = self._counter(99999)
        self.page_end_spin = self._counter(99999)
        pages = QWidget()
        p_lay = QHBoxLayout(pages)
        p_lay.setContentsMargins(0, 0, 0, 0)
        p_lay.addWidget(self.page_start_spin)
        p_lay.addWidget(self.page_end_spin)
        form.addRow("Pages", pages)

        self.comment_edit = QPlainTextEdit()
        self.comment_edit.setFixedHeight(60)
        form.addRow("Comment", self.comment_edit)

        outer.addLayout(form)

        buttons = QDialogButtonBox(QDialogButtonBox.Save | QDialogButtonBox.Cancel, Qt.Horizontal)
        buttons.accepted.connect(self.submit)
        buttons.rejected.connect(self.reject)
        outer.addWidget(buttons)

    @staticmethod
    def _counter(maximum=9999):
        spin = QSpinBox()
        spin.setRange(0, maximum)
        return spin

    def study_date(self):
        choice = self.day_combo.currentText()
        if choice == "Today":
            return date.today()
        if choice == "Yesterday":
            return date.today() - timedelta(days=1)
        return self.date_edit.date().toPython()

    # The record that gets written, in the same field names the study API uses.
    def build_entry(self):
        return {
            "studyDate": self.study_date().isoformat(),
            "category": self.category_combo.currentData(),
            "subject": self.subject_edit.text().strip(),
            "duration": self.duration_edit.text().strip(),
            "durationMin": hms_to_minutes(self.duration_edit.text()),
            "content": self.content_edit.text().strip(),
            "questionsRight": self.right_spin.value(),
            "questionsWrong": self.wrong_spin.value(),
            "pageStart": self.page_start_spin.value() or None,
            "pageEnd": self.page_end_spin.value() or None,
            "comment": self.comment_edit.toPlainText().strip(),
        }

    # Returns the first problem with the form, or None when it can be saved.
    def validate(self):
        if not self.subject_edit.text().strip():
            return "Enter a subject."
        if not self.category_combo.currentData():
            return "Select a category."
        if parse_hms(self.duration_edit.text()) is None:
            return "Duration must look like HH:MM:SS."
        return None

    def submit(self):
        problem = self.validate()
        if problem is not None:
            QMessageBox.warning(self, "Add study", problem)
            return
        try:
            self.saved_path = config.save_study_session(self.build_entry())
        except OSError as e:
            log.exception("Failed to save study session")
            QMessageBox.warning(self, "Save Error", f"Failed to save study session:\n{e}")
            return
        self.accept()
