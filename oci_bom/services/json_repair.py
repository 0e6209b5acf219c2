"""
JSON recovery for LLM output.

`parse_llm_json()` isolates the JSON payload (code fence or first balanced
block), tries a strict parse, then applies the repair strategies in order,
cumulatively, re-parsing after each one. Every strategy is a pure
text → text function.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable

from oci_bom.errors import DraftParseError

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json|JSON)?\s*(.*?)```", re.DOTALL)


# ── Payload isolation ────────────────────────────────────

def strip_code_fences(text: str) -> str:
    match = _FENCE_RE.search(text)
    if match:
        return match.group(1).strip()
    # Opening fence without a closing one (truncated response)
    stripped = text.strip()
    if stripped.startswith("```"):
        stripped = stripped[3:]
        if stripped[:4].lower() == "json":
            stripped = stripped[4:]
    return stripped.strip()


def extract_json_block(text: str) -> str:
    """Return the first balanced {...} or [...] block, or the tail from its start."""
    starts = [i for i in (text.find("{"), text.find("[")) if i != -1]
    if not starts:
        return text
    start = min(starts)
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in "{[":
            depth += 1
        elif ch in "}]":
            depth -= 1
            if depth == 0:
                return text[start:i + 1]
    return text[start:]


# ── Repair strategies (least → most aggressive) ──────────

def remove_trailing_commas(text: str) -> str:
    return re.sub(r",\s*([}\]])", r"\1", text)


def quote_bare_keys(text: str) -> str:
    return re.sub(r"([{,]\s*)([A-Za-z_][A-Za-z0-9_]*)\s*:", r'\1"\2":', text)


def single_to_double_quotes(text: str) -> str:
    def _swap(match: re.Match) -> str:
        inner = match.group(2).replace('"', '\\"')
        return f'{match.group(1)}"{inner}"'

    return re.sub(r"([\[{,:]\s*)'([^'\n]*)'", _swap, text)


def collapse_control_whitespace(text: str) -> str:
    return re.sub(r"[\r\n\t]+", " ", text)


REPAIR_STRATEGIES: list[tuple[str, Callable[[str], str]]] = [
    ("remove_trailing_commas", remove_trailing_commas),
    ("quote_bare_keys", quote_bare_keys),
    ("single_to_double_quotes", single_to_double_quotes),
    ("collapse_control_whitespace", collapse_control_whitespace),
]


# ── Entry point ──────────────────────────────────────────

def parse_llm_json(raw: str) -> Any:
    """Parse *raw* LLM output into Python data or raise DraftParseError."""
    if not raw or not raw.strip():
        raise DraftParseError("Empty completion response", raw_response=raw or "")

    candidate = extract_json_block(strip_code_fences(raw))

    try:
        return json.loads(candidate)
    except json.JSONDecodeError as exc:
        last_error = str(exc)

    applied: list[str] = []
    for name, strategy in REPAIR_STRATEGIES:
        candidate = strategy(candidate)
        applied.append(name)
        try:
            data = json.loads(candidate)
            logger.info(f"[JSON] Recovered after repairs: {applied}")
            return data
        except json.JSONDecodeError as exc:
            last_error = str(exc)

    logger.error(f"[JSON] All repair strategies failed: {last_error}")
    logger.debug(f"[JSON] Unparseable response:\n{raw}")
    raise DraftParseError(
        f"Could not parse completion response as JSON: {last_error}",
        raw_response=raw,
        last_error=last_error,
    )
