"""Project domain model — the root scope for every construction record."""

from datetime import datetime, timezone
from enum import Enum

from app.models import db


class ProjectStatus(str, Enum):
    ACTIVE = "active"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"
    ARCHIVED = "archived"


PROJECT_STATUSES = {s.value for s in ProjectStatus}


class Project(db.Model):
    """A construction / rail project: one site, one budget, one team."""

    __tablename__ = "projects"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, default="")
    status = db.Column(
        db.String(20), nullable=False, default="active",
        comment="active | on_hold | completed | archived",
    )
    start_date = db.Column(db.Date, nullable=True)
    target_end_date = db.Column(db.Date, nullable=True)
    actual_end_date = db.Column(db.Date, nullable=True)
    budget_total = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    budget_spent = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    location = db.Column(db.String(300), default="")
    client = db.Column(db.String(200), default="")
    created_by = db.Column(db.Integer, db.ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)

    created_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Deleting a project removes everything scoped to it.
    members = db.relationship("ProjectMember", backref="project", lazy="dynamic",
                              cascade="all, delete-orphan", passive_deletes=True)
    submittals = db.relationship("Submittal", backref="project", lazy="dynamic",
                                 cascade="all, delete-orphan", passive_deletes=True)
    rfis = db.relationship("RFI", backref="project", lazy="dynamic",
                           cascade="all, delete-orphan", passive_deletes=True)
    daily_logs = db.relationship("DailyLog", backref="project", lazy="dynamic",
                                 cascade="all, delete-orphan", passive_deletes=True)
    punch_list_items = db.relationship("PunchListItem", backref="project", lazy="dynamic",
                                       cascade="all, delete-orphan", passive_deletes=True)
    milestones = db.relationship("Milestone", backref="project", lazy="dynamic",
                                 cascade="all, delete-orphan", passive_deletes=True)
    activity = db.relationship("ActivityLogEntry", backref="project", lazy="dynamic",
                               cascade="all, delete-orphan", passive_deletes=True)

    def to_dict(self, include_budget: bool = True) -> dict:
        """Serialize project fields; budget figures only when *include_budget*."""
        d = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "status": self.status,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "target_end_date": self.target_end_date.isoformat() if self.target_end_date else None,
            "actual_end_date": self.actual_end_date.isoformat() if self.actual_end_date else None,
            "location": self.location,
            "client": self.client,
            "created_by": self.created_by,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_budget:
            d["budget_total"] = float(self.budget_total or 0)
            d["budget_spent"] = float(self.budget_spent or 0)
        return d

    def __repr__(self) -> str:
        return f"<Project {self.id}: {self.name}>"
