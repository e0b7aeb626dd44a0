"""
RailCommand
Submittal domain model.

Lifecycle:
    draft → submitted → under_review → approved | conditional | rejected

Review outcomes (approved / conditional / rejected) are gated by the
``submittal:review`` action and stamp reviewer + review timestamp.
"""

from datetime import datetime, timezone
from enum import Enum

from app.models import db
from app.models.base import ProjectScopedModel


class SubmittalStatus(str, Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    CONDITIONAL = "conditional"
    REJECTED = "rejected"


REVIEW_OUTCOMES = frozenset({
    SubmittalStatus.APPROVED,
    SubmittalStatus.CONDITIONAL,
    SubmittalStatus.REJECTED,
})


class Submittal(ProjectScopedModel):
    """Shop drawing / product data package submitted for engineer review."""

    __tablename__ = "submittals"
    NUMBER_PREFIX = "SUB"

    id = db.Column(db.Integer, primary_key=True)
    number = db.Column(db.String(20), nullable=False, comment="SUB-001, SUB-002, ...")
    title = db.Column(db.String(300), nullable=False)
    description = db.Column(db.Text, default="")
    spec_section = db.Column(db.String(200), default="", comment="e.g. 34 11 13 - Track Construction")
    status = db.Column(db.String(20), nullable=False, default=SubmittalStatus.DRAFT.value)
    submitted_by = db.Column(db.Integer, db.ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    reviewed_by = db.Column(db.Integer, db.ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    submit_date = db.Column(db.DateTime(timezone=True), nullable=True)
    due_date = db.Column(db.Date, nullable=True)
    review_date = db.Column(db.DateTime(timezone=True), nullable=True)
    review_notes = db.Column(db.Text, nullable=True)
    milestone_id = db.Column(db.Integer, db.ForeignKey("milestones.id", ondelete="SET NULL"), nullable=True)
    created_at = db.Column(
        db.DateTime(timezone=True), nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        db.UniqueConstraint("project_id", "number", name="uq_submittals_project_number"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "project_id": self.project_id,
            "number": self.number,
            "title": self.title,
            "description": self.description,
            "spec_section": self.spec_section,
            "status": self.status,
            "submitted_by": self.submitted_by,
            "reviewed_by": self.reviewed_by,
            "submit_date": self.submit_date.isoformat() if self.submit_date else None,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "review_date": self.review_date.isoformat() if self.review_date else None,
            "review_notes": self.review_notes,
            "milestone_id": self.milestone_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<Submittal {self.id}: {self.number} [{self.status}]>"
