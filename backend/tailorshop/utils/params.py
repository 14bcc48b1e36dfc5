from __future__ import annotations

from typing import List, Optional


def split_csv(raw: Optional[str]) -> List[str]:
    """Split a comma-separated query parameter, dropping blanks."""
    return [item.strip() for item in (raw or "").split(",") if item.strip()]
