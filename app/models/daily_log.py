"""
RailCommand
Daily log domain model.

Models:
    - DailyLog: one field report per day (weather, summary, safety notes)
    - DailyLogPersonnel: crew headcount by trade/company
    - DailyLogEquipment: equipment on site
    - DailyLogWorkItem: quantities installed
"""

from datetime import datetime, timezone

from app.models import db
from app.models.base import ProjectScopedModel


class DailyLog(ProjectScopedModel):
    __tablename__ = "daily_logs"
    __table_args__ = (
        db.Index("ix_daily_logs_project_date", "project_id", "log_date"),
    )

    id = db.Column(db.Integer, primary_key=True)
    log_date = db.Column(db.Date, nullable=False)
    created_by = db.Column(db.Integer, db.ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    weather_temp = db.Column(db.Float, nullable=True)
    weather_conditions = db.Column(db.String(100), default="")
    weather_wind = db.Column(db.String(100), default="")
    work_summary = db.Column(db.Text, nullable=False)
    safety_notes = db.Column(db.Text, default="")
    created_at = db.Column(
        db.DateTime(timezone=True), nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    personnel = db.relationship("DailyLogPersonnel", backref="daily_log", lazy="select",
                                cascade="all, delete-orphan", passive_deletes=True)
    equipment = db.relationship("DailyLogEquipment", backref="daily_log", lazy="select",
                                cascade="all, delete-orphan", passive_deletes=True)
    work_items = db.relationship("DailyLogWorkItem", backref="daily_log", lazy="select",
                                 cascade="all, delete-orphan", passive_deletes=True)

    def to_dict(self, include_children=False):
        d = {
            "id": self.id,
            "project_id": self.project_id,
            "log_date": self.log_date.isoformat() if self.log_date else None,
            "created_by": self.created_by,
            "weather_temp": self.weather_temp,
            "weather_conditions": self.weather_conditions,
            "weather_wind": self.weather_wind,
            "work_summary": self.work_summary,
            "safety_notes": self.safety_notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
        if include_children:
            d["personnel"] = [p.to_dict() for p in self.personnel]
            d["equipment"] = [e.to_dict() for e in self.equipment]
            d["work_items"] = [w.to_dict() for w in self.work_items]
        return d

    def __repr__(self):
        return f"<DailyLog {self.id}: project={self.project_id} {self.log_date}>"


class DailyLogPersonnel(db.Model):
    __tablename__ = "daily_log_personnel"

    id = db.Column(db.Integer, primary_key=True)
    daily_log_id = db.Column(
        db.Integer, db.ForeignKey("daily_logs.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role = db.Column(db.String(100), nullable=False)
    headcount = db.Column(db.Integer, nullable=False, default=0)
    company = db.Column(db.String(200), default="")

    def to_dict(self):
        return {
            "id": self.id,
            "daily_log_id": self.daily_log_id,
            "role": self.role,
            "headcount": self.headcount,
            "company": self.company,
        }


class DailyLogEquipment(db.Model):
    __tablename__ = "daily_log_equipment"

    id = db.Column(db.Integer, primary_key=True)
    daily_log_id = db.Column(
        db.Integer, db.ForeignKey("daily_logs.id", ondelete="CASCADE"), nullable=False, index=True
    )
    equipment_type = db.Column(db.String(100), nullable=False)
    count = db.Column(db.Integer, nullable=False, default=0)
    notes = db.Column(db.Text, default="")

    def to_dict(self):
        return {
            "id": self.id,
            "daily_log_id": self.daily_log_id,
            "equipment_type": self.equipment_type,
            "count": self.count,
            "notes": self.notes,
        }


class DailyLogWorkItem(db.Model):
    __tablename__ = "daily_log_work_items"

    id = db.Column(db.Integer, primary_key=True)
    daily_log_id = db.Column(
        db.Integer, db.ForeignKey("daily_logs.id", ondelete="CASCADE"), nullable=False, index=True
    )
    description = db.Column(db.Text, nullable=False)
    quantity = db.Column(db.Float, nullable=False, default=0)
    unit = db.Column(db.String(30), default="")
    location = db.Column(db.String(300), default="")

    def to_dict(self):
        return {
            "id": self.id,
            "daily_log_id": self.daily_log_id,
            "description": self.description,
            "quantity": self.quantity,
            "unit": self.unit,
            "location": self.location,
        }
