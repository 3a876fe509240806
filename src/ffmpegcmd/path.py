from os import path as _path, name as _os_name, devnull
from shutil import which
from subprocess import run, DEVNULL, PIPE, STDOUT
import re, shlex
from packaging.version import Version
import logging

logger = logging.getLogger("ffmpegcmd")

from .errors import FFmpegcmdError
from .rcparams import rcParams
from .utils.parser import form_shell_cmd
from . import plugins

# fmt:off
__all__ = [
    "found", "where", "find", "ffmpeg", "versions", "check_version", "DEVNULL",
    "PIPE", "STDOUT", "devnull", "FFmpegNotFound"
]
# fmt:on


class FFmpegNotFound(FFmpegcmdError):
    def __init__(self):
        super().__init__(
            "FFmpeg executable not found. Run `ffmpegcmd.set_path()` first, set "
            "rcParams['path.ffmpeg'], or place the FFmpeg executable in an "
            "auto-detectable path location."
        )


FFMPEG_BIN = None
FFMPEG_VER = None

def found():
    """`True` if ffmpeg binary is located

    :return: True if ffmpeg is found
    :rtype: bool

    """

    return bool(FFMPEG_BIN)


def where():
    """Get the path to FFmpeg executable

    :return: Path to FFmpeg exectutable
    :rtype: str
    """

    if not FFMPEG_BIN:
        raise FFmpegNotFound()

    return FFMPEG_BIN


def find(ffmpeg_path=None):
    """Set FFmpeg executable

    :param ffmpeg_path: Full path to either the ffmpeg executable file or
                        to the folder housing it, defaults to None
    :type ffmpeg_path: str, optional
    :returns: ffmpeg path and ffmpeg version
    :rtype: Tuple[str,Version]

    If `ffmpeg_path` specifies a directory, the name of the executable is
    auto-set to `ffmpeg`.

    If no argument is specified, the executable is auto-detected in the following orders.

    (1) ``rcParams["path.ffmpeg"]``
    (2) Run the `finder` plugin functions and use the first valid path. The
        builtin plugins check the directory given by the ``FFMPEG_DIR``
        environmental variable and then the system PATH.

    """

    global FFMPEG_BIN, FFMPEG_VER

    if ffmpeg_path is None:
        ffmpeg_path = rcParams["path.ffmpeg"]

    if ffmpeg_path is not None:
        if _path.isdir(ffmpeg_path):
            ext = ".exe" if _os_name == "nt" else ""
            ffdir = ffmpeg_path
            ffmpeg_path = _path.join(ffdir, f"ffmpeg{ext}")
            if not which(ffmpeg_path):
                raise ValueError(f"ffmpeg not found in {ffdir}")
        elif not which(ffmpeg_path):
            raise ValueError(f"ffmpeg executable not found or {ffmpeg_path}")
        FFMPEG_BIN = ffmpeg_path
    else:
        res = plugins.get_hook().finder()
        if res is None:
            raise RuntimeError("Failed to auto-detect ffmpeg executable.")
        FFMPEG_BIN = res

    ver = versions()["version"]
    m = re.match(r"\d+(?:\.\d+(?:\d+)?)?", ver)
    FFMPEG_VER = Version(m[0]) if m else "nightly"

    logger.info("using %s (version %s)", FFMPEG_BIN, FFMPEG_VER)

    return FFMPEG_BIN, FFMPEG_VER


def ffmpeg(args, sp_run=None, *sp_args, executable=None, **other_sp_args):
    """just run ffmpeg without bells-n-whistles

    :param args: FFmpeg command arguments without `ffmpeg`
    :type args: str or Sequence[str]
    :param sp_run: command runner, defaults to subprocess.run
    :param sp_run: Callable, optional
    :param *sp_args: sp_run arguments
    :type *sp_args: tuple, optional
    :param executable: FFmpeg executable to run, defaults to None (found one)
    :type executable: str, optional
    :param **other_sp_args: sp_run keyword arguments
    :type **other_sp_args: dict, optional
    :returns: sp_run output
    :rtype: subprocess.CompletedProcess or subprocess.Popen or others
    """

    if isinstance(args, str):
        args = shlex.split(args)

    executable = executable or FFMPEG_BIN
    if executable is None:
        raise FFmpegNotFound()

    logger.debug(form_shell_cmd([executable, *args]))
    try:
        return (sp_run or run)((executable, *args), *sp_args, **other_sp_args)
    except FileNotFoundError as e:
        raise FFmpegNotFound() from e


def versions():
    """Get FFmpeg version and configuration information

    :return: versions of ffmpeg and its av libraries as well as build configuration
    :rtype: dict

    ==================  ====  =========================================
    key                 type  description
    ==================  ====  =========================================
    'version'           str   FFmpeg version
    'configuration'     list  list of build configuration options
    'library_versions'  dict  version numbers of dependent av libraries
    ==================  ====  =========================================

    """
    s = ffmpeg(
        ["-version"], stdout=PIPE, universal_newlines=True, encoding="utf-8"
    ).stdout.splitlines()
    return parse_versions(s)


def parse_versions(lines):
    """parse the output of ``ffmpeg -version``

    :param lines: output lines
    :type lines: seq(str)
    :return: see :py:func:`versions`
    :rtype: dict
    """
    s = lines
    m = re.match(r"ffmpeg version (\S+)", s[0])
    if m is None:
        raise ValueError(f"Unexpected FFmpeg version output: {s[0]}")
    v = dict(version=m[1])
    i = 2 if len(s) > 1 and s[1].startswith("built with") else 1
    if i < len(s) and s[i].startswith("configuration:"):
        v["configuration"] = sorted([m[1] for m in re.finditer(r"\s--(\S+)", s[i])])
        i += 1
    lv = None
    for l in s[i:]:
        m = re.match(r"(\S+)\s+(.+?) /", l)
        if m:
            if lv is None:
                lv = v["library_versions"] = {}
            lv[m[1]] = m[2].replace(" ", "")
    return v


def check_version(ver, cond=None):
    """check FFmpeg version

    :param ver: desired version string
    :type ver: str
    :param cond: condition, defaults to None (">=)
    :type cond: "==", "!=", "<", "<=", ">", ">=", optional
    :return: True if condition is met
    :rtype: bool
    """
    if FFMPEG_VER is None:
        raise FFmpegNotFound()
    if not isinstance(FFMPEG_VER, Version):
        raise ValueError(f"cannot compare against FFmpeg {FFMPEG_VER} build")
    return {
        "==": FFMPEG_VER.__eq__,
        "!=": FFMPEG_VER.__ne__,
        "<": FFMPEG_VER.__lt__,
        "<=": FFMPEG_VER.__le__,
        ">": FFMPEG_VER.__gt__,
        ">=": FFMPEG_VER.__ge__,
    }[cond or ">="](Version(ver))
