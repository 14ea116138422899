from typing import Iterable, List, Set, Tuple

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from xtermux.database.entities import GuideProgress


class GuideProgressDao:
    """Data access for :class:`GuideProgress` rows."""

    def __init__(self, db: Session):
        self.db = db

    def completed_steps(self, user_id: str) -> List[GuideProgress]:
        stmt = (
            select(GuideProgress)
            .where(GuideProgress.user_id == user_id)
            .order_by(GuideProgress.guide_id, GuideProgress.step_index)
        )
        return list(self.db.scalars(stmt))

    def toggle(self, user_id: str, guide_id: str, step_index: int) -> bool:
        """Flip one step and return whether it is now completed."""
        row = self.db.scalar(
            select(GuideProgress).where(
                GuideProgress.user_id == user_id,
                GuideProgress.guide_id == guide_id,
                GuideProgress.step_index == step_index,
            )
        )
        if row is None:
            self.db.add(GuideProgress(user_id=user_id, guide_id=guide_id, step_index=step_index))
            completed = True
        else:
            self.db.delete(row)
            completed = False
        self.db.commit()
        return completed

    def replace(self, user_id: str, steps: Iterable[Tuple[str, int]]) -> None:
        self.db.execute(delete(GuideProgress).where(GuideProgress.user_id == user_id))
        unique: Set[Tuple[str, int]] = set(steps)
        for guide_id, step_index in sorted(unique):
            self.db.add(GuideProgress(user_id=user_id, guide_id=guide_id, step_index=step_index))
        self.db.commit()

    def reset_guides(self, user_id: str, guide_ids: Iterable[str]) -> None:
        self.db.execute(
            delete(GuideProgress).where(
                GuideProgress.user_id == user_id,
                GuideProgress.guide_id.in_(list(guide_ids)),
            )
        )
        self.db.commit()
