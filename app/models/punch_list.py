"""
RailCommand
Punch-list domain model.

Lifecycle:
    open → in_progress → resolved → verified   (reopen: any → open)

``resolved`` is gated by ``punch_list:resolve`` and ``verified`` by
``punch_list:verify``; other moves need project membership only.
"""

from datetime import datetime, timezone
from enum import Enum

from app.models import db
from app.models.base import ProjectScopedModel


class PunchListStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    VERIFIED = "verified"


class PunchListItem(ProjectScopedModel):
    """Deficiency found on site that must be fixed and signed off."""

    __tablename__ = "punch_list_items"
    NUMBER_PREFIX = "PL"

    id = db.Column(db.Integer, primary_key=True)
    number = db.Column(db.String(20), nullable=False, comment="PL-001, PL-002, ...")
    title = db.Column(db.String(300), nullable=False)
    description = db.Column(db.Text, default="")
    location = db.Column(db.String(300), default="")
    status = db.Column(db.String(20), nullable=False, default=PunchListStatus.OPEN.value)
    priority = db.Column(db.String(20), nullable=False, default="medium")
    assigned_to = db.Column(db.Integer, db.ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    created_by = db.Column(db.Integer, db.ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    due_date = db.Column(db.Date, nullable=True)
    resolved_date = db.Column(db.DateTime(timezone=True), nullable=True)
    verified_date = db.Column(db.DateTime(timezone=True), nullable=True)
    resolution_notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(
        db.DateTime(timezone=True), nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        db.UniqueConstraint("project_id", "number", name="uq_punch_list_project_number"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "project_id": self.project_id,
            "number": self.number,
            "title": self.title,
            "description": self.description,
            "location": self.location,
            "status": self.status,
            "priority": self.priority,
            "assigned_to": self.assigned_to,
            "created_by": self.created_by,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "resolved_date": self.resolved_date.isoformat() if self.resolved_date else None,
            "verified_date": self.verified_date.isoformat() if self.verified_date else None,
            "resolution_notes": self.resolution_notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<PunchListItem {self.id}: {self.number} [{self.status}]>"
