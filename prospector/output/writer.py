"""Serialization of aggregation results for the downstream triage consumer."""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Iterable, List, Literal

from prospector.domain.models import Opportunity
from prospector.logging import get_logger

logger = get_logger(__name__, component="output")

OutputFormat = Literal["json", "jsonl"]

OUTPUT_FORMATS = ("json", "jsonl")


def opportunity_to_dict(opportunity: Opportunity) -> Dict[str, Any]:
    """Plain-dict form with a stable field order."""
    return opportunity.model_dump(mode="json")


def serialize_opportunities(
    opportunities: Iterable[Opportunity], format_type: OutputFormat = "json"
) -> str:
    """
    Render opportunities as a JSON array or as JSON Lines.

    Args:
        opportunities: Records in the order they should appear
        format_type: 'json' for one indented array, 'jsonl' for one object per line

    Returns:
        Serialized text, newline-terminated

    Raises:
        ValueError: If format_type is not supported
    """
    if format_type not in OUTPUT_FORMATS:
        raise ValueError(f"Invalid output format: {format_type}. Must be one of: {', '.join(OUTPUT_FORMATS)}")

    records: List[Dict[str, Any]] = [opportunity_to_dict(o) for o in opportunities]

    if format_type == "jsonl":
        return "".join(json.dumps(record, ensure_ascii=False) + "\n" for record in records)

    return json.dumps(records, ensure_ascii=False, indent=2) + "\n"


def write_opportunities(
    opportunities: Iterable[Opportunity],
    path: Path,
    format_type: OutputFormat = "json",
) -> int:
    """
    Write serialized opportunities to ``path`` atomically.

    The text goes to a temporary file in the same directory which then
    replaces the target, so readers never observe a partial file.

    Returns:
        Number of records written
    """
    records = list(opportunities)
    payload = serialize_opportunities(records, format_type)

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise

    logger.info(
        f"Wrote {len(records)} opportunities to {path}",
        extra={"event": "output.written", "path": str(path), "count": len(records), "format": format_type},
    )
    return len(records)
