import os
import sys
from pathlib import Path
from dataclasses import dataclass

APP_NAME = "StudyTimer"

# Lil helper function to create a directory (and its parents) if missing.
def ensure_directory(path: Path):
    path.mkdir(parents=True,exist_ok=True)
    return path

# Picks the per-user base folder. STUDYTIMER_HOME always wins (tests and portable installs point it somewhere
# disposable), then the usual platform locations.
def _user_data_base():
    override = os.getenv("STUDYTIMER_HOME")
    if override:
        return Path(override)
    if sys.platform == "win32":
        appdata = os.getenv("APPDATA")
        if not appdata:
            raise RuntimeError("Missing APPDATA environment variable, cannot determine data directories.")
        return Path(appdata) / APP_NAME
    xdg = os.getenv("XDG_DATA_HOME")
    base = Path(xdg) if xdg else Path.home() / ".local" / "share"
    return base / APP_NAME

# Dataclass for accessing paths across program.
@dataclass(frozen=False)
class ProjectPaths:

    data: Path

    logs: Path
    current: Path
    channels: Path
    sessions: Path

    @staticmethod
    def build():
        # Folder for all studytimer user-specific and session related stuff
        data = ensure_directory(_user_data_base())

        # Folders within the data folder
        logs = ensure_directory(data / "logs")
        current = ensure_directory(data / "current")
        channels = ensure_directory(data / "channels")
        sessions = ensure_directory(data / "sessions")

        return ProjectPaths(
            data = data,
            logs = logs,
            current = current,
            channels = channels,
            sessions = sessions
        )
PATHS = ProjectPaths.build()
