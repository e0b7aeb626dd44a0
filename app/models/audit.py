"""
RailCommand
Activity log domain model.

Models:
    - ActivityLogEntry: immutable, append-only record of one completed
      mutation in a project (the project activity feed).
"""

from datetime import datetime, timezone
from enum import Enum

from app.models import db


# ── Constants ────────────────────────────────────────────────────────────────

class ActivityEntityType(str, Enum):
    SUBMITTAL = "submittal"
    RFI = "rfi"
    DAILY_LOG = "daily_log"
    PUNCH_LIST = "punch_list"
    MILESTONE = "milestone"
    PROJECT = "project"


class ActivityVerb(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    STATUS_CHANGED = "status_changed"
    COMMENTED = "commented"
    APPROVED = "approved"
    REJECTED = "rejected"
    SUBMITTED = "submitted"
    ASSIGNED = "assigned"


class ActivityLogEntry(db.Model):
    """
    One row per successful mutating operation.

    Rows are never updated or deleted by application code; they only
    disappear when their project is deleted. Feed order is
    ``created_at DESC, id DESC`` so equal timestamps fall back to
    insertion order.
    """

    __tablename__ = "activity_log"
    __table_args__ = (
        db.Index("idx_activity_project_created", "project_id", "created_at"),
        db.Index("idx_activity_entity", "entity_type", "entity_id"),
    )

    id = db.Column(db.Integer, primary_key=True)
    project_id = db.Column(
        db.Integer,
        db.ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Polymorphic entity reference
    entity_type = db.Column(
        db.String(30), nullable=False,
        comment="submittal | rfi | daily_log | punch_list | milestone | project",
    )
    entity_id = db.Column(db.String(36), nullable=False)

    # What happened
    action = db.Column(
        db.String(30), nullable=False,
        comment="created | updated | status_changed | commented | approved | rejected | submitted | assigned",
    )
    description = db.Column(db.Text, nullable=False, default="")
    performed_by = db.Column(
        db.Integer,
        db.ForeignKey("profiles.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        comment="NULL for system sweeps (e.g. RFI overdue derivation)",
    )

    created_at = db.Column(
        db.DateTime(timezone=True), nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    performed_by_profile = db.relationship("Profile", lazy="joined")

    def to_dict(self) -> dict:
        profile = self.performed_by_profile
        return {
            "id": self.id,
            "project_id": self.project_id,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "action": self.action,
            "description": self.description,
            "performed_by": self.performed_by,
            "performed_by_profile": (
                {"id": profile.id, "full_name": profile.full_name, "email": profile.email}
                if profile is not None else None
            ),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<ActivityLogEntry {self.id}: {self.action} on {self.entity_type}/{self.entity_id}>"


# ── Writer ───────────────────────────────────────────────────────────────────

def write_activity(
    *,
    project_id: int,
    entity_type: ActivityEntityType | str,
    entity_id,
    action: ActivityVerb | str,
    description: str,
    performed_by: int | None,
) -> ActivityLogEntry:
    """
    Append a single activity row.  Uses ``flush`` so callers keep
    transaction control.

    Raises ValueError for an entity type or verb outside the closed sets.
    """
    entity_type = ActivityEntityType(entity_type)
    action = ActivityVerb(action)

    entry = ActivityLogEntry(
        project_id=project_id,
        entity_type=entity_type.value,
        entity_id=str(entity_id),
        action=action.value,
        description=description,
        performed_by=performed_by,
    )
    db.session.add(entry)
    db.session.flush()
    return entry
