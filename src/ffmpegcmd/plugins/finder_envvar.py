"""ffmpegcmd plugin to find ffmpeg in the directory given by FFMPEG_DIR"""

import os
from shutil import which

from pluggy import HookimplMarker

hookimpl = HookimplMarker("ffmpegcmd")

__all__ = ["finder"]


@hookimpl(tryfirst=True)
def finder():
    """find ffmpeg executable in ``$FFMPEG_DIR``"""

    ffdir = os.environ.get("FFMPEG_DIR", None)
    if not ffdir:
        return None

    ext = ".exe" if os.name == "nt" else ""
    path = os.path.join(ffdir, f"ffmpeg{ext}")
    return path if which(path) else None
