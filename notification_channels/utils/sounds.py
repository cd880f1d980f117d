"""Notification sound resolution.

A channel payload names its sound by resource name (``snd_nm``), not by
location. A sound resolver maps that name to a URI, returning None when the
name is unknown; the channel builder then falls back to the default
notification sound.

Layout searched by DirectorySoundResolver:
    {SOUNDS_DIR}/
    ├── chime.wav
    ├── alert.ogg
    └── ...
"""

import re
from collections.abc import Callable
from pathlib import Path

import structlog

__all__ = [
    "SOUND_EXTENSIONS",
    "DirectorySoundResolver",
    "SoundResolver",
    "no_sound_resources",
]

log = structlog.get_logger(__name__)

SoundResolver = Callable[[str], "str | None"]

SOUND_EXTENSIONS = (".wav", ".ogg", ".mp3", ".m4a")

# Resource names are plain identifiers; anything else could escape the directory
_SOUND_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


def no_sound_resources(name: str) -> str | None:
    """Resolver used when no sound directory is configured."""
    return None


class DirectorySoundResolver:
    """Resolve sound names to ``file://`` URIs inside one directory.

    The name may be given with or without extension ("chime" or "chime.wav").
    """

    def __init__(self, sounds_dir: Path) -> None:
        self._sounds_dir = sounds_dir

    def __call__(self, name: str) -> str | None:
        if not _SOUND_NAME_PATTERN.match(name) or ".." in name:
            log.warning("sound_name_rejected", sound_name=name)
            return None

        candidates = [self._sounds_dir / name]
        candidates.extend(self._sounds_dir / f"{name}{ext}" for ext in SOUND_EXTENSIONS)
        for path in candidates:
            if path.is_file():
                return path.resolve().as_uri()

        log.debug("sound_not_found", sound_name=name, directory=str(self._sounds_dir))
        return None
