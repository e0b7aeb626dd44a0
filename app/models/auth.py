"""
Auth Models — organizations, profiles (actors) and project memberships.

A profile is the backing record of an authenticated identity: it carries
the actor's *global* role. Project-level authority comes from
``ProjectMember.project_role`` and is evaluated by
``app.services.permission_service``.
"""

from datetime import datetime, timezone
from enum import Enum

from app.models import db


class GlobalRole(str, Enum):
    """Actor-wide role, independent of any project."""
    ADMIN = "admin"
    MANAGER = "manager"
    MEMBER = "member"
    VIEWER = "viewer"


class ProjectRole(str, Enum):
    """Per-project role governing project-scoped actions."""
    MANAGER = "manager"
    SUPERINTENDENT = "superintendent"
    FOREMAN = "foreman"
    ENGINEER = "engineer"
    CONTRACTOR = "contractor"
    INSPECTOR = "inspector"
    OWNER = "owner"


ORGANIZATION_TYPES = {"contractor", "engineer", "owner", "inspector"}

# Roles whose members get the derived can_edit flag.
CAN_EDIT_ROLES = frozenset({
    ProjectRole.MANAGER,
    ProjectRole.SUPERINTENDENT,
    ProjectRole.FOREMAN,
    ProjectRole.ENGINEER,
})


def role_can_edit(project_role) -> bool:
    """Derived can_edit flag for a project role (unknown roles → False)."""
    try:
        return ProjectRole(project_role) in CAN_EDIT_ROLES
    except ValueError:
        return False


# ═══════════════════════════════════════════════════════════════
# 1. ORGANIZATIONS
# ═══════════════════════════════════════════════════════════════
class Organization(db.Model):
    __tablename__ = "organizations"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    type = db.Column(db.String(30), nullable=False, default="contractor",
                     comment="contractor | engineer | owner | inspector")
    created_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    profiles = db.relationship("Profile", back_populates="organization", lazy="dynamic")

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


# ═══════════════════════════════════════════════════════════════
# 2. PROFILES
# ═══════════════════════════════════════════════════════════════
class Profile(db.Model):
    __tablename__ = "profiles"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(200), nullable=False, unique=True)
    full_name = db.Column(db.String(200), nullable=False, default="")
    phone = db.Column(db.String(50), default="")
    role = db.Column(
        db.String(20), nullable=False, default=GlobalRole.VIEWER.value,
        comment="admin | manager | member | viewer",
    )
    organization_id = db.Column(
        db.Integer, db.ForeignKey("organizations.id", ondelete="SET NULL"), nullable=True
    )
    avatar_url = db.Column(db.String(500), default="")
    created_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    organization = db.relationship("Organization", back_populates="profiles")
    project_memberships = db.relationship(
        "ProjectMember", back_populates="profile", lazy="dynamic",
        cascade="all, delete-orphan",
    )

    @property
    def global_role(self) -> GlobalRole:
        """Global role as an enum; unrecognised values degrade to viewer."""
        try:
            return GlobalRole(self.role)
        except ValueError:
            return GlobalRole.VIEWER

    @property
    def is_admin(self) -> bool:
        return self.global_role is GlobalRole.ADMIN

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "full_name": self.full_name,
            "phone": self.phone,
            "role": self.role,
            "organization_id": self.organization_id,
            "avatar_url": self.avatar_url,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<Profile {self.id}: {self.email} ({self.role})>"


# ═══════════════════════════════════════════════════════════════
# 3. PROJECT MEMBERS
# ═══════════════════════════════════════════════════════════════
class ProjectMember(db.Model):
    __tablename__ = "project_members"

    id = db.Column(db.Integer, primary_key=True)
    project_id = db.Column(
        db.Integer, db.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    profile_id = db.Column(
        db.Integer, db.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    project_role = db.Column(
        db.String(30), nullable=False,
        comment="manager | superintendent | foreman | engineer | contractor | inspector | owner",
    )
    can_edit = db.Column(db.Boolean, nullable=False, default=False)
    added_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        db.UniqueConstraint("project_id", "profile_id", name="uq_project_member"),
        db.Index("ix_project_members_profile", "profile_id"),
    )

    profile = db.relationship("Profile", back_populates="project_memberships")

    def to_dict(self, include_profile=False):
        d = {
            "id": self.id,
            "project_id": self.project_id,
            "profile_id": self.profile_id,
            "project_role": self.project_role,
            "can_edit": self.can_edit,
            "added_at": self.added_at.isoformat() if self.added_at else None,
        }
        if include_profile and self.profile is not None:
            d["profile"] = self.profile.to_dict()
        return d

    def __repr__(self):
        return f"<ProjectMember project={self.project_id} profile={self.profile_id} role={self.project_role}>"
