"""Colors and Qt stylesheet generation."""

THEMES = {
    "Light": {
        "bg": "#F5F5F7",
        "text": "#1D1D1F",
        "running_text": "#1A7F37",
        "muted_text": "#8E8E93",
        "button_bg": "#FFFFFF",
        "button_text": "#1D1D1F",
        "button_active": "#E5E5EA",
        "separator": "#D1D1D6",
        "border": 1,
    },
    "Dark": {
        "bg": "#1C1C1E",
        "text": "#F2F2F7",
        "running_text": "#66F081",
        "muted_text": "#8E8E93",
        "button_bg": "#2C2C2E",
        "button_text": "#F2F2F7",
        "button_active": "#3A3A3C",
        "separator": "#48484A",
        "border": 1,
    },
}


def build_stylesheet(theme_name):
    """Build a Qt stylesheet string from a theme name."""
    t = THEMES.get(theme_name, THEMES["Light"])
    return (
        f"QMainWindow, QDialog, QWidget {{ background-color: {t['bg']}; }}"
        f"QLabel {{ color: {t['text']}; background: transparent; }}"
        f"QPushButton {{"
        f"  color: {t['button_text']};"
        f"  background-color: {t['button_bg']};"
        f"  border: {t['border']}px solid rgba(128,128,128,0.4);"
        f"  padding: 4px 8px;"
        f"}}"
        f"QPushButton:hover, QPushButton:pressed {{"
        f"  background-color: {t['button_active']};"
        f"}}"
        f"QPushButton:disabled {{ color: {t['muted_text']}; }}"
        f"QLineEdit, QComboBox, QSpinBox, QDateEdit, QPlainTextEdit {{"
        f"  color: {t['button_text']};"
        f"  background-color: {t['button_bg']};"
        f"  border: {t['border']}px solid rgba(128,128,128,0.4);"
        f"  padding: 3px 5px;"
        f"}}"
        f"QComboBox QAbstractItemView {{"
        f"  color: {t['button_text']};"
        f"  background-color: {t['button_bg']};"
        f"  selection-background-color: {t['button_active']};"
        f"}}"
        f"QToolTip {{"
        f"  background-color: {t['bg']};"
        f"  color: {t['text']};"
        f"  border: 1px solid {t['separator']};"
        f"  padding: 4px 8px;"
        f"}}"
    )
