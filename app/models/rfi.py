"""
RailCommand
RFI (Request for Information) domain model.

Lifecycle:
    open → answered | closed | overdue

``overdue`` is derived from the due date by a system sweep, never set by
a user. An official response moves the RFI to ``answered``.
"""

from datetime import datetime, timezone
from enum import Enum

from app.models import db
from app.models.base import ProjectScopedModel


class RFIStatus(str, Enum):
    OPEN = "open"
    ANSWERED = "answered"
    CLOSED = "closed"
    OVERDUE = "overdue"


class Priority(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RFI(ProjectScopedModel):
    """Formal question from the field to the design team."""

    __tablename__ = "rfis"
    NUMBER_PREFIX = "RFI"

    id = db.Column(db.Integer, primary_key=True)
    number = db.Column(db.String(20), nullable=False, comment="RFI-001, RFI-002, ...")
    subject = db.Column(db.String(300), nullable=False)
    question = db.Column(db.Text, nullable=False)
    answer = db.Column(db.Text, nullable=True)
    status = db.Column(db.String(20), nullable=False, default=RFIStatus.OPEN.value)
    priority = db.Column(db.String(20), nullable=False, default=Priority.MEDIUM.value)
    submitted_by = db.Column(db.Integer, db.ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    assigned_to = db.Column(db.Integer, db.ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    submit_date = db.Column(db.DateTime(timezone=True), nullable=True)
    due_date = db.Column(db.Date, nullable=True)
    response_date = db.Column(db.DateTime(timezone=True), nullable=True)
    milestone_id = db.Column(db.Integer, db.ForeignKey("milestones.id", ondelete="SET NULL"), nullable=True)
    created_at = db.Column(
        db.DateTime(timezone=True), nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    responses = db.relationship(
        "RFIResponse", backref="rfi", lazy="dynamic",
        cascade="all, delete-orphan", passive_deletes=True,
        order_by="RFIResponse.id",
    )

    __table_args__ = (
        db.UniqueConstraint("project_id", "number", name="uq_rfis_project_number"),
    )

    def to_dict(self, include_responses=False):
        d = {
            "id": self.id,
            "project_id": self.project_id,
            "number": self.number,
            "subject": self.subject,
            "question": self.question,
            "answer": self.answer,
            "status": self.status,
            "priority": self.priority,
            "submitted_by": self.submitted_by,
            "assigned_to": self.assigned_to,
            "submit_date": self.submit_date.isoformat() if self.submit_date else None,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "response_date": self.response_date.isoformat() if self.response_date else None,
            "milestone_id": self.milestone_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
        if include_responses:
            d["responses"] = [r.to_dict() for r in self.responses]
        return d

    def __repr__(self):
        return f"<RFI {self.id}: {self.number} [{self.status}]>"


class RFIResponse(db.Model):
    """One reply in an RFI thread; official replies answer the RFI."""

    __tablename__ = "rfi_responses"

    id = db.Column(db.Integer, primary_key=True)
    rfi_id = db.Column(db.Integer, db.ForeignKey("rfis.id", ondelete="CASCADE"), nullable=False, index=True)
    author_id = db.Column(db.Integer, db.ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    content = db.Column(db.Text, nullable=False)
    is_official_response = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(
        db.DateTime(timezone=True), nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "rfi_id": self.rfi_id,
            "author_id": self.author_id,
            "content": self.content,
            "is_official_response": self.is_official_response,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
