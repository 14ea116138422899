"""Setup guides and the progress arithmetic shared by the guide routes."""

import math
from functools import lru_cache
from importlib import resources
from typing import Iterable, List, Optional, Tuple

from pydantic import BaseModel, TypeAdapter


class GuideStep(BaseModel):
    title: str
    content: str
    command: Optional[str] = None


class Guide(BaseModel):
    id: str
    title: str
    description: str
    steps: List[GuideStep]


@lru_cache(maxsize=1)
def load_guides() -> Tuple[Guide, ...]:
    raw = resources.files("xtermux.catalog").joinpath("data/guides.json").read_text(encoding="utf-8")
    return tuple(TypeAdapter(List[Guide]).validate_json(raw))


def get_guide(guide_id: str) -> Optional[Guide]:
    return next((g for g in load_guides() if g.id == guide_id), None)


def step_key(guide_id: str, step_index: int) -> str:
    return f"{guide_id}-{step_index}"


def parse_step_key(key: str) -> Optional[Tuple[str, int]]:
    """
    Split a ``"<guideId>-<stepIndex>"`` key on its last dash.

    Guide ids may themselves contain dashes (``setup-1-0`` is step 0 of
    ``setup-1``). Returns None for keys that do not end in an integer.
    """
    guide_id, sep, index = key.rpartition("-")
    if not sep or not guide_id or not index.isdigit():
        return None
    return guide_id, int(index)


def progress_percent(guide: Guide, completed_keys: Iterable[str]) -> int:
    total = len(guide.steps)
    if total == 0:
        return 0
    keys = set(completed_keys)
    done = sum(1 for i in range(total) if step_key(guide.id, i) in keys)
    # half-up rounding, so 1 of 8 steps reads 13%
    return int(math.floor(done / total * 100 + 0.5))
