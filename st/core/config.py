import copy
import json
from datetime import datetime
from st.common.logger import log
from st.common.setup import PATHS
from st.core.store import STORAGE_KEY
from st.core.sync import CHANNEL_NAME
from st.util.misc import now_iso

#region === Helpers and Paths ===

STATE_PATH = PATHS.current / f"{STORAGE_KEY}.json"
SETTINGS_PATH = PATHS.data / "settings.json"
CHANNEL_DIR = PATHS.channels
SESSIONS_DIR = PATHS.sessions

THEME_NAMES = ("Light", "Dark")

# Default values for settings.json. The type of each default is also the type a stored value must have.
_SETTINGS_DEFAULTS = {
    "theme": "Light",
    "refresh_interval_ms": 200,
    "always_on_top": False,
    "confirm_reset": True,
    "channel_name": CHANNEL_NAME,
}

# Helper to return a truly fresh settings dict.
def build_default_settings():
    return dict(_SETTINGS_DEFAULTS)

def _valid_setting(key, value):
    default = _SETTINGS_DEFAULTS[key]
    # bool is an int, don't let `true` pass as an interval or `1` as a flag
    if isinstance(default, bool) or isinstance(value, bool):
        return isinstance(value, bool) and isinstance(default, bool)
    if not isinstance(value, type(default)):
        return False
    if key == "theme":
        return value in THEME_NAMES
    if key == "refresh_interval_ms":
        return 16 <= value <= 1000
    if key == "channel_name":
        return bool(value.strip())
    return True

#endregion === Helpers and Paths ===

#region === Settings ===

# Loads settings.json, filling anything missing or malformed from the defaults. Never raises.
def load_settings():
    try:
        if not SETTINGS_PATH.exists():
            log.info("No existing settings.json found, writing default settings.")
            settings = build_default_settings()
            save_settings(settings)
            return settings
        with open(SETTINGS_PATH, "r", encoding="utf-8") as f:
            stored = json.load(f)
        if not isinstance(stored, dict):
            raise TypeError(f"settings.json must hold an object, got {type(stored).__name__}")

        settings = build_default_settings()
        defaulted_values = set()
        for key in _SETTINGS_DEFAULTS:
            if key in stored and _valid_setting(key, stored[key]):
                settings[key] = stored[key]
            else:
                defaulted_values.add(key)

        if defaulted_values:
            log.warning(f"Loaded settings from '{SETTINGS_PATH}', but with missing or invalid values that were defaulted: {', '.join(sorted(defaulted_values))}")
        else:
            log.info(f"Successfully loaded settings from '{SETTINGS_PATH}'.")
        return settings
    except (json.JSONDecodeError, UnicodeDecodeError, OSError, TypeError):
        log.warning("Ran into an error while trying to load settings.json, falling back to default settings.", exc_info=True)
        return build_default_settings()

def save_settings(settings):
    SETTINGS_PATH.parent.mkdir(parents=True, exist_ok=True)
    with open(SETTINGS_PATH, "w", encoding="utf-8") as f:
        json.dump(settings, f, indent=2)
    log.info(f"Successfully saved settings to '{SETTINGS_PATH}'")

#endregion === Settings ===

#region === Study sessions ===

# Records one logged study session as its own file in SESSIONS_DIR and returns the path.
def save_study_session(entry):
    record = copy.deepcopy(entry)
    record["saved_at"] = now_iso()

    SESSIONS_DIR.mkdir(parents=True, exist_ok=True)
    ts = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    final_path = SESSIONS_DIR / f"session_{ts}.json"
    with open(final_path, "w", encoding="utf-8") as f:
        json.dump(record, f, indent=2)
    log.info(f"Saved study session ({record.get('subject')}, {record.get('durationMin')} min) to '{final_path}'")
    return final_path

#endregion === Study sessions ===
