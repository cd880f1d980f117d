"""Channel payload loading from JSON files.

Payloads normally arrive over the network; this loader reads the same JSON
from disk for the command-line tool and for replaying captured payloads.
"""

import json
from pathlib import Path
from typing import Any

import structlog

from notification_channels.constants import PAYLOAD_CHANNEL_LIST_KEY
from notification_channels.exceptions import PayloadError

log = structlog.get_logger(__name__)


def load_payload(file_path: Path) -> dict[str, Any]:
    """Load a channel payload JSON object from a file.

    Args:
        file_path: Path to a JSON file holding one payload object.

    Returns:
        The decoded payload.

    Raises:
        PayloadError: If the file is missing, is not valid JSON, or does not
            hold a JSON object.
    """
    if not file_path.exists():
        log.warning("payload_file_not_found", file=str(file_path))
        raise PayloadError(f"Payload file not found: {file_path}")

    try:
        with file_path.open("r", encoding="utf-8") as f:
            payload = json.load(f)
    except json.JSONDecodeError as e:
        log.error("payload_parse_error", file=str(file_path), error=e.msg, line=e.lineno)
        raise PayloadError(f"Invalid JSON in {file_path}: {e}") from e
    except UnicodeDecodeError as e:
        log.error("payload_decode_error", file=str(file_path), error=str(e))
        raise PayloadError(f"Payload file is not UTF-8: {file_path}") from e

    if not isinstance(payload, dict):
        log.error("payload_not_object", file=str(file_path), type=type(payload).__name__)
        raise PayloadError(f"Payload in {file_path} must be a JSON object")

    log.info(
        "payload_loaded",
        file=str(file_path),
        has_channel_list=PAYLOAD_CHANNEL_LIST_KEY in payload,
    )
    return payload
