"""
The rcsetup module contains the validation code for customization using
ffmpegcmd's rc settings.

Each rc setting is assigned a function used to validate any attempted changes
to that setting.  The validation functions are defined in the rcsetup module,
and are used to construct the rcParams global object which stores the settings
and is referenced throughout ffmpegcmd.
"""

import os


def validate_bool(b):
    """Convert b to ``bool`` or raise."""
    if isinstance(b, str):
        b = b.lower()
    if b in ("t", "y", "yes", "on", "true", "1", 1, True):
        return True
    elif b in ("f", "n", "no", "off", "false", "0", 0, False):
        return False
    else:
        raise ValueError(f"Cannot convert {b!r} to bool")


def _validate_pathlike(s):
    if s is None or isinstance(s, str) and s.lower() == "none":
        return None
    if isinstance(s, (str, os.PathLike)):
        return os.fsdecode(s)
    raise ValueError(f"{s!r} is not a path-like object")


_validators = {
    "path.ffmpeg": _validate_pathlike,
    "ffmpeg.hide_banner": validate_bool,
    "ffmpeg.nostdin": validate_bool,
    "command.per_output_maps": validate_bool,
}

defaultParams = {
    "path.ffmpeg": None,
    "ffmpeg.hide_banner": True,
    "ffmpeg.nostdin": True,
    "command.per_output_maps": False,
}
