"""Loading scripts into KWin and reading their output back.

The script is written to a uniquely named temp file whose name doubles
as the marker, loaded through KWin's D-Bus scripting interface, run,
stopped, and its output recovered from the systemd user journal.
"""

import logging
import os
import subprocess
import tempfile
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .config import Settings
from .errors import ErrorCode, TransportError
from .logging_config import log_subprocess_call, log_timing

logger = logging.getLogger(__name__)

# Import pydbus lazily to handle missing dependency gracefully
try:
    from pydbus import SessionBus
    PYDBUS_AVAILABLE = True
except ImportError:
    PYDBUS_AVAILABLE = False

KWIN_BUS_NAME = "org.kde.KWin"
SCRIPTING_PATH = "/Scripting"
SCRIPTING_INTERFACE = "org.kde.kwin.Scripting"
SCRIPT_INTERFACE = "org.kde.kwin.Script"

JOURNAL_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


class ScriptFile:
    """Uniquely named temp file holding one generated script.

    The file name is the per-invocation marker. The file is created on
    entry and removed on exit.

    Examples:
        >>> with ScriptFile(prefix="kwindo-") as script_file:
        ...     script_file.marker
        'kwindo-k3j2_x9a'
    """

    def __init__(self, prefix: str = "kwindo-", directory: Optional[Path] = None):
        self.prefix = prefix
        self.directory = directory
        self.path: Optional[Path] = None

    def __enter__(self) -> "ScriptFile":
        fd, name = tempfile.mkstemp(prefix=self.prefix, dir=self.directory)
        os.close(fd)
        self.path = Path(name)
        logger.debug(f"Created script file {self.path}")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self.path is not None:
            self.path.unlink(missing_ok=True)
            logger.debug(f"Removed script file {self.path}")

    @property
    def marker(self) -> str:
        if self.path is None:
            raise RuntimeError("ScriptFile is not open")
        return self.path.name

    def write(self, text: str) -> None:
        try:
            self.path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise TransportError(
                ErrorCode.SCRIPT_WRITE_FAILED,
                f"write {self.path}",
                str(e),
                suggestion="Check that the temp directory is writable",
            ) from e


class KWinScripting:
    """Thin wrapper around KWin's D-Bus scripting interface."""

    def __init__(self, timeout: float = 5.0, bus=None):
        """
        Initialize scripting client.

        Args:
            timeout: Timeout in seconds for each D-Bus call
            bus: pydbus bus (default: session bus, connected on first use)
        """
        self.timeout = timeout
        self._bus = bus

    @property
    def bus(self):
        if self._bus is None:
            if not PYDBUS_AVAILABLE:
                raise TransportError(
                    ErrorCode.DBUS_UNAVAILABLE,
                    "D-Bus connect",
                    "pydbus is not available",
                    suggestion="Install pydbus and PyGObject, or use --dry-run",
                )
            try:
                self._bus = SessionBus()
            except Exception as e:
                raise TransportError(ErrorCode.DBUS_UNAVAILABLE, "D-Bus connect", str(e)) from e
        return self._bus

    def load_script(self, path: Path) -> int:
        """
        Load a script file into KWin.

        Args:
            path: Script file path

        Returns:
            KWin script id
        """
        try:
            scripting = self.bus.get(KWIN_BUS_NAME, SCRIPTING_PATH)[SCRIPTING_INTERFACE]
            script_id = scripting.loadScript(str(path), timeout=self.timeout)
        except TransportError:
            raise
        except Exception as e:
            raise TransportError(ErrorCode.SCRIPT_LOAD_FAILED, "loadScript", str(e)) from e

        logger.debug(f"Script ID: {script_id}")
        return int(script_id)

    def run_script(self, script_id: int) -> None:
        """Run a loaded script to completion, then unload it.

        The script is stopped even when ``run`` fails; a failing ``stop``
        after a failed ``run`` is only logged so the run error surfaces.
        """
        try:
            script = self.bus.get(KWIN_BUS_NAME, f"{SCRIPTING_PATH}/Script{script_id}")[SCRIPT_INTERFACE]
        except TransportError:
            raise
        except Exception as e:
            raise TransportError(ErrorCode.SCRIPT_RUN_FAILED, f"Script{script_id}.run", str(e)) from e

        run_failed = False
        try:
            script.run(timeout=self.timeout)
        except Exception as e:
            run_failed = True
            raise TransportError(ErrorCode.SCRIPT_RUN_FAILED, f"Script{script_id}.run", str(e)) from e
        finally:
            try:
                script.stop(timeout=self.timeout)
            except Exception as e:
                if not run_failed:
                    raise TransportError(
                        ErrorCode.SCRIPT_RUN_FAILED, f"Script{script_id}.stop", str(e)
                    ) from e
                logger.warning(f"Failed to stop Script{script_id} after failed run: {e}")


def journal_command(since: datetime, units: List[str]) -> List[str]:
    """Build the journalctl invocation for KWin output since a point in time."""
    cmd = [
        "journalctl",
        f"--since={since.strftime(JOURNAL_TIME_FORMAT)}",
        "--user",
    ]
    cmd.extend(f"--unit={unit}" for unit in units)
    cmd.append("--output=cat")
    return cmd


def read_journal(since: datetime, units: List[str]) -> str:
    """
    Read KWin's journal output since a point in time.

    Args:
        since: Local start time of the run
        units: systemd user units to read

    Returns:
        Journal text, one message per line

    Raises:
        TransportError: If journalctl cannot be run
    """
    cmd = journal_command(since, units)
    try:
        # Other scripts share these units; their bytes need not be valid UTF-8.
        result = subprocess.run(
            cmd, capture_output=True, encoding="utf-8", errors="replace", check=False
        )
    except OSError as e:
        raise TransportError(
            ErrorCode.JOURNAL_READ_FAILED,
            "journalctl",
            str(e),
            suggestion="kwindo needs systemd's journalctl to read script output",
        ) from e

    log_subprocess_call(cmd, result, logger)
    if result.returncode != 0:
        raise TransportError(
            ErrorCode.JOURNAL_READ_FAILED,
            "journalctl",
            (result.stderr or "").strip() or f"exit status {result.returncode}",
        )
    return result.stdout


def execute_script(path: Path, settings: Settings, scripting: Optional[KWinScripting] = None) -> str:
    """
    Load, run and stop a script, then return the journal text it produced.

    Args:
        path: Script file path
        settings: Resolved settings
        scripting: Scripting client (default: session bus client)

    Returns:
        Raw journal text since the run started
    """
    if scripting is None:
        scripting = KWinScripting(timeout=settings.dbus_timeout)

    with log_timing("Load script into KWin", logger):
        script_id = scripting.load_script(path)

    with log_timing("Run script", logger):
        start_time = datetime.now()
        scripting.run_script(script_id)

    output = read_journal(start_time, settings.journal_units)
    logger.debug(f"KWin log from the systemd journal:\n{output.rstrip()}")
    return output
