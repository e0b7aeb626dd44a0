"""
RailCommand
Schedule domain model — project milestones.

Cross-field rule (enforced by milestone_service, not here): setting status
to ``complete`` fills ``actual_date`` and forces ``percent_complete`` to 100
unless the caller supplies them.
"""

from datetime import datetime, timezone
from enum import Enum

from app.models import db
from app.models.base import ProjectScopedModel


class MilestoneStatus(str, Enum):
    NOT_STARTED = "not_started"
    ON_TRACK = "on_track"
    AT_RISK = "at_risk"
    BEHIND = "behind"
    COMPLETE = "complete"


class Milestone(ProjectScopedModel):
    __tablename__ = "milestones"
    __table_args__ = (
        db.CheckConstraint("percent_complete BETWEEN 0 AND 100", name="ck_milestones_percent"),
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, default="")
    target_date = db.Column(db.Date, nullable=True)
    actual_date = db.Column(db.Date, nullable=True)
    status = db.Column(db.String(20), nullable=False, default=MilestoneStatus.NOT_STARTED.value)
    percent_complete = db.Column(db.Integer, nullable=False, default=0)
    budget_planned = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    budget_actual = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    sort_order = db.Column(db.Integer, nullable=False, default=1)
    created_at = db.Column(
        db.DateTime(timezone=True), nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "project_id": self.project_id,
            "name": self.name,
            "description": self.description,
            "target_date": self.target_date.isoformat() if self.target_date else None,
            "actual_date": self.actual_date.isoformat() if self.actual_date else None,
            "status": self.status,
            "percent_complete": self.percent_complete,
            "budget_planned": float(self.budget_planned or 0),
            "budget_actual": float(self.budget_actual or 0),
            "sort_order": self.sort_order,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<Milestone {self.id}: {self.name} [{self.status}]>"
