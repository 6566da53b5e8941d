# ui/state_helpers.py
from __future__ import annotations

import hashlib
import json
from typing import Any, Dict

# Inputs only. Never results.
_FINGERPRINT_KEYS = ("location", "roof", "consumption", "options")


def _canonical(x: Any) -> Any:
    """JSON-stable form: sorted keys, tuples as lists, 22 and 22.0 alike."""
    if isinstance(x, dict):
        return {str(k): _canonical(x[k]) for k in sorted(x, key=str)}
    if isinstance(x, (list, tuple)):
        return [_canonical(v) for v in x]
    if isinstance(x, bool) or x is None or isinstance(x, str):
        return x
    if isinstance(x, (int, float)):
        return float(x)
    return repr(x)


def build_inputs_fingerprint(ctx: Any) -> str:
    snapshot: Dict[str, Any] = {k: _canonical(getattr(ctx, k, None)) for k in _FINGERPRINT_KEYS}
    blob = json.dumps(snapshot, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(blob.encode("utf-8")).hexdigest()


def save_result_fingerprint(ctx: Any) -> str:
    ctx.result_inputs_fingerprint = build_inputs_fingerprint(ctx)
    return ctx.result_inputs_fingerprint


def is_result_stale(ctx: Any) -> bool:
    """True once inputs differ from those the stored result was computed with."""
    saved = getattr(ctx, "result_inputs_fingerprint", "")
    return bool(saved) and saved != build_inputs_fingerprint(ctx)
