from __future__ import annotations

import json
import re
from typing import Any, List, Optional, Tuple

import structlog

logger = structlog.get_logger(__name__)

_CELL_UPDATES_RE = re.compile(r"Cell Updates:\s*(\[.*?\])", re.IGNORECASE | re.DOTALL)
_ACTIONS_RE = re.compile(r"Actions:\s*(\[.*?\])", re.IGNORECASE | re.DOTALL)


def _parse_labelled(text: str, pattern: re.Pattern, field: str) -> Optional[List[Any]]:
    m = pattern.search(text)
    if not m:
        return None
    try:
        return json.loads(m.group(1))
    except json.JSONDecodeError as e:
        logger.debug("structured_payload_unparsable", field=field, error=str(e))
        return None


def extract_structured_payload(text: str) -> Tuple[Optional[List[Any]], Optional[List[Any]]]:
    """Pull `Cell Updates: [...]` and `Actions: [...]` out of free-form model text.

    Both labels are searched over the full text independently. The bracketed
    span is matched non-greedily, so nested arrays are cut at the first `]` and
    usually fail to parse; that field then stays None. Returns
    (cell_updates, actions).
    """
    cell_updates = _parse_labelled(text, _CELL_UPDATES_RE, "cell_updates")
    actions = _parse_labelled(text, _ACTIONS_RE, "actions")
    return cell_updates, actions
