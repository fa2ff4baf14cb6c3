"""Runtime settings for kwindo.

Settings are resolved once from the environment at process start. The
only value that changes the generated script is ``kde5``; the rest tune
how the script is loaded into KWin and how its output is read back.
"""

import os
from typing import List, Mapping, Optional

from pydantic import BaseModel, Field

from .errors import ConfigError

DEFAULT_JOURNAL_UNITS = [
    "plasma-kwin_wayland.service",
    "plasma-kwin_x11.service",
]


class Settings(BaseModel):
    """Resolved kwindo settings."""

    kde5: bool = Field(False, description="Target the KDE 5 scripting API")
    dbus_timeout: float = Field(5.0, gt=0, description="Timeout in seconds for each D-Bus call")
    journal_units: List[str] = Field(
        default_factory=lambda: list(DEFAULT_JOURNAL_UNITS),
        min_length=1,
        description="systemd user units carrying KWin script output",
    )
    log_prefix: str = Field("js: ", description="Prefix KWin puts before script output")
    script_prefix: str = Field("kwindo-", min_length=1, description="Script file name prefix")


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build settings from environment variables.

    Recognized variables:
        KDE_SESSION_VERSION: "5" selects the KDE 5 API
        KWINDO_DBUS_TIMEOUT: D-Bus call timeout in seconds
        KWINDO_JOURNAL_UNITS: Comma separated list of journal units
        KWINDO_LOG_PREFIX: Transport prefix before the marker

    Args:
        environ: Environment mapping (default: os.environ)

    Returns:
        Settings instance

    Raises:
        ConfigError: If an override has an invalid value
    """
    if environ is None:
        environ = os.environ

    values = {"kde5": environ.get("KDE_SESSION_VERSION") == "5"}

    timeout = environ.get("KWINDO_DBUS_TIMEOUT")
    if timeout is not None:
        try:
            values["dbus_timeout"] = float(timeout)
        except ValueError:
            raise ConfigError("KWINDO_DBUS_TIMEOUT", timeout, "not a number")
        if values["dbus_timeout"] <= 0:
            raise ConfigError("KWINDO_DBUS_TIMEOUT", timeout, "must be positive")

    units = environ.get("KWINDO_JOURNAL_UNITS")
    if units is not None:
        unit_list = [u.strip() for u in units.split(",") if u.strip()]
        if not unit_list:
            raise ConfigError("KWINDO_JOURNAL_UNITS", units, "no units given")
        values["journal_units"] = unit_list

    prefix = environ.get("KWINDO_LOG_PREFIX")
    if prefix is not None:
        values["log_prefix"] = prefix

    return Settings(**values)
