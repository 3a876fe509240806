"""thread class to monitor FFmpeg progress"""

from __future__ import annotations

import re, os
from threading import Thread, Event
from time import sleep
from tempfile import TemporaryDirectory
import logging

logger = logging.getLogger("ffmpegcmd")

from ._typing import ProgressCallable

__all__ = ["ProgressMonitorThread", "parse_progress_value"]


def parse_progress_value(val: str) -> int | float | str:
    """convert a progress report value to int or float if possible"""
    val = val.strip()
    try:
        return int(val)
    except ValueError:
        try:
            return float(val)
        except ValueError:
            return val


class ProgressMonitorThread(Thread):
    """FFmpeg progress monitor class

    :param callback: progress callback ``callback(status, done)``, returning True
                     to cancel FFmpeg. If None, the thread is inert.
    :type callback: ProgressCallable or None
    :param cancelfun: function to call to cancel FFmpeg, defaults to None
    :type cancelfun: Callable, optional
    :param url: progress file path, defaults to None to use a temporary file
    :type url: str, optional
    :param timeout: polling interval in seconds, defaults to 10e-3
    :type timeout: float, optional

    FFmpeg writes its progress reports to ``url`` (via its ``-progress`` option)
    as ``key=value`` lines, and each report ends with a ``progress=continue`` or
    ``progress=end`` line.
    """

    def __init__(
        self,
        callback: ProgressCallable | None,
        cancelfun=None,
        url: str | None = None,
        timeout: float = 10e-3,
    ):
        if callback is None:
            self.url = self.cancelfun = None
            super().__init__()
        else:
            tempdir = None if url else TemporaryDirectory()
            self.url = url or os.path.join(tempdir.name, "progress.txt")
            self.cancelfun = cancelfun
            super().__init__(args=(callback, tempdir, timeout))
        self._stop_monitor = Event()

    def start(self):
        if self.url:
            super().start()

    def join(self, timeout=None):
        if self.url and self.is_alive():
            self._stop_monitor.set()
            super().join(timeout)

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.join()
        return False

    def run(self):
        callback, tempdir, timeout = self._args
        url = self.url

        pattern = re.compile(r"(.+)?=(.+)")
        logger.debug('[progress_monitor] monitoring "%s"', url)

        while not (self._stop_monitor.is_set() or os.path.isfile(url)):
            sleep(timeout)

        logger.debug("[progress_monitor] file found")

        if os.path.isfile(url):
            with open(url, "rt") as f:
                d = {}
                last_mtime = None

                def update(last_mtime, wait=True):
                    mtime = os.fstat(f.fileno()).st_mtime
                    if mtime == last_mtime:
                        if wait:
                            sleep(timeout)
                        return last_mtime

                    for line in f.readlines():
                        m = pattern.match(line)
                        if not m:
                            continue
                        if m[1] != "progress":
                            d[m[1]] = parse_progress_value(m[2])
                            continue

                        done = m[2].strip() == "end"
                        status = {**d}
                        d.clear()
                        try:
                            cancel = callback(status, done)
                        except Exception:
                            logger.exception("[progress_monitor] user callback error")
                            continue
                        if cancel and self.cancelfun:
                            logger.debug(
                                "[progress_monitor] operation canceled by user agent"
                            )
                            self.cancelfun()
                            self.cancelfun = None
                    return mtime

                while not self._stop_monitor.is_set():
                    last_mtime = update(last_mtime)

                # one final update in case FFmpeg terminated during sleep
                update(None, False)

        if tempdir is not None:
            try:
                tempdir.cleanup()
            except OSError as e:
                logger.warning("[progress_monitor] failed to clean up: %s", e)

        logger.debug("[progress_monitor] terminated")
