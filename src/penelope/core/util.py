from __future__ import annotations
from dataclasses import asdict
from typing import Any, Dict

from .model import TransferResult


def result_asdict(res: TransferResult) -> Dict[str, Any]:
    """Return a JSON-serialisable dict for a transfer result."""
    if not res.success:
        return {"success": False, "source": res.source, "error": res.error}
    payload = {k: v for k, v in asdict(res).items() if v is not None}
    return payload
