from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from xtermux.database.entities.base import Base, utcnow


class GuideProgress(Base):
    """
    A completed guide step.

    A row exists only while the step is completed; un-completing a step
    deletes the row.
    """

    __tablename__ = "guide_progress"
    __table_args__ = (UniqueConstraint("user_id", "guide_id", "step_index", name="uq_guide_step"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    guide_id = Column(String(64), nullable=False)
    step_index = Column(Integer, nullable=False)
    completed_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    user = relationship("User", back_populates="progress")

    @property
    def key(self) -> str:
        return f"{self.guide_id}-{self.step_index}"
