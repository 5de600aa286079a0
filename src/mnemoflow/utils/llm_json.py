"""Parsing of JSON payloads returned by the generation port."""
import json
from typing import Any


def strip_code_fences(text: str) -> str:
    """Remove a surrounding markdown code fence, if any."""
    text = text.strip()
    if text.startswith("```"):
        lines = text.split("\n")
        lines = lines[1:]
        if lines and lines[-1].strip().startswith("```"):
            lines = lines[:-1]
        text = "\n".join(lines).strip()
    return text


def parse_json_payload(text: str) -> Any:
    """Decode a JSON value from generation output.

    Leading prose before the first ``[`` or ``{`` is skipped. ``json.JSONDecodeError``
    propagates when nothing decodable remains.
    """
    text = strip_code_fences(text)
    starts = [i for i in (text.find("["), text.find("{")) if i >= 0]
    if starts:
        text = text[min(starts):]
    value, _ = json.JSONDecoder().raw_decode(text)
    return value
