"""
Marker-tagged output protocol.

Every line the generated script prints has the form::

    <marker> <CHANNEL> <payload>

The marker is unique per invocation, so lines from concurrently running
scripts can share one log stream and still be told apart. The log host
adds its own prefix in front of the marker (``js: `` for KWin), which the
decoder strips before looking at the channel.
"""

import logging
from typing import Iterable, Optional, Union

from .models import Channel, LogRecord, ScriptOutput

logger = logging.getLogger(__name__)

DEFAULT_LOG_PREFIX = "js: "


def channel_tag(marker: str, channel: Channel) -> str:
    """Leading words of every line on a channel."""
    return f"{marker} {channel.value}"


def decode_line(line: str, marker: str, prefix: str = DEFAULT_LOG_PREFIX) -> Optional[LogRecord]:
    """
    Decode one log line.

    Args:
        line: Raw log line
        marker: Marker of the invocation being decoded
        prefix: Transport prefix in front of the marker

    Returns:
        LogRecord, or None if the line belongs to someone else
    """
    head = f"{prefix}{marker} "
    if not line.startswith(head):
        return None

    channel_name, _, payload = line[len(head):].partition(" ")
    try:
        channel = Channel(channel_name)
    except ValueError:
        logger.debug(f"Skipping line with unknown channel {channel_name!r}: {line!r}")
        return None

    return LogRecord(channel=channel, payload=payload)


def decode_log(
    log: Union[str, Iterable[str]],
    marker: str,
    prefix: str = DEFAULT_LOG_PREFIX,
) -> ScriptOutput:
    """
    Collect this invocation's records from a shared log, in order.

    Args:
        log: Log text or an iterable of lines
        marker: Marker of the invocation being decoded
        prefix: Transport prefix in front of the marker

    Returns:
        ScriptOutput holding every matching record
    """
    lines = log.splitlines() if isinstance(log, str) else log

    output = ScriptOutput()
    for line in lines:
        record = decode_line(line.rstrip("\r\n"), marker, prefix)
        if record is not None:
            output.records.append(record)

    logger.debug(
        f"Decoded {len(output.records)} records for {marker} "
        f"({len(output.results)} results, {len(output.errors)} errors)"
    )
    return output
