"""Session log file: header, message markers and archiving after failures."""

from __future__ import annotations

import logging
import platform
import sys
import zipfile
from datetime import datetime
from pathlib import Path

from pultctl.constants import APP_NAME

APP_VERSION = "1.0.0"

_ARCHIVE_NAME_FORMAT = "%d_%m_%Y-%H_%M_%S"


def _marker(levelno: int) -> str:
    if levelno >= logging.CRITICAL:
        return "(FF) "
    if levelno >= logging.ERROR:
        return "(EE) "
    if levelno >= logging.WARNING:
        return "(WW) "
    return "(II) "


def describe_build(app_name, version):
    """Return the description written at the top of each log."""
    if not isinstance(version, str):
        version = ".".join(str(part) for part in version)
    return f"{app_name} {version}\nBased on Python {platform.python_version()}.\n"


def os_info():
    """Return a line naming the running operating system."""
    system = platform.system()
    if system == "Windows":
        release = platform.release()
        name = f"Windows {release}" if release else "Windows"
    elif system:
        name = system
    else:
        name = "Unknown"
    return f"Current Operating System: {name}"


class _SessionLogHandler(logging.Handler):
    """Echoes records to stdout and appends them to the log file."""

    def __init__(self, path: Path, stream):
        super().__init__(logging.DEBUG)
        self.path = path
        self._stream = stream
        self.previous_level = logging.WARNING

    def emit(self, record):
        try:
            msg = record.getMessage()
            marker = _marker(record.levelno)
            print(f"{marker}{msg}", file=sys.stdout)
            if self._stream is not None and not self._stream.closed:
                stamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
                self._stream.write(
                    f"{marker}{stamp}({record.pathname}:{record.lineno}){msg}\n"
                )
                self._stream.flush()
        except Exception:
            self.handleError(record)

    def close(self):
        if self._stream is not None and not self._stream.closed:
            self._stream.close()
        super().close()


def install_log(path):
    """Open the log file at ``path``, write its header and route logging to it."""
    path = Path(path)
    stream = path.open("w", encoding="utf-8")
    stream.write("\n" + describe_build(APP_NAME, APP_VERSION) + "\n")
    stream.write("Markers: (II) information, (WW) warning,\n")
    stream.write("(EE) error, (FF) fatal error.\n")
    stream.write(os_info() + "\n")
    stream.write(f"Runned at {datetime.now().strftime('%d.%m.%Y %H:%M:%S')}.\n\n")
    stream.flush()

    handler = _SessionLogHandler(path, stream)
    root = logging.getLogger()
    handler.previous_level = root.level
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)
    logging.getLogger(__name__).debug("Success opening log file")
    return handler


def archive_log(log_path, archive_dir, now):
    """Compress ``log_path`` into ``archive_dir`` under a name made from ``now``."""
    log_path = Path(log_path)
    archive_dir = Path(archive_dir)
    archive_dir.mkdir(parents=True, exist_ok=True)
    target = archive_dir / f"{now.strftime(_ARCHIVE_NAME_FORMAT)}.zip"
    with zipfile.ZipFile(target, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        archive.write(log_path, arcname=log_path.name)
    return target


def finish_log(handler, exit_code, archive_dir):
    """Close the session log; archive it when ``exit_code`` is non-zero.

    Returns the archive path, or None when nothing was archived.
    """
    logging.getLogger(__name__).debug("Success closing log file")
    root = logging.getLogger()
    root.removeHandler(handler)
    root.setLevel(handler.previous_level)
    handler.close()
    if exit_code == 0:
        return None
    return archive_log(handler.path, archive_dir, datetime.now())