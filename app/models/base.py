"""
ProjectScopedModel — Abstract base class for project-scoped entities.

Every construction record (submittal, RFI, daily log, punch-list item,
milestone) belongs to exactly one project. Inheriting from this base adds:
  - project_id FK column with index (cascade on project delete)
  - query_for_project(project_id) classmethod
  - next_number(project_id) for models that carry a human-readable number
"""

from app.models import db


class ProjectScopedModel(db.Model):
    """Abstract base for project-scoped tables."""
    __abstract__ = True

    # Numbered models set this to e.g. "SUB" → SUB-001, SUB-002, ...
    NUMBER_PREFIX: str | None = None
    NUMBER_WIDTH = 3

    project_id = db.Column(
        db.Integer,
        db.ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    @classmethod
    def query_for_project(cls, project_id):
        """Return a query filtered by project_id."""
        return cls.query.filter_by(project_id=project_id)

    @classmethod
    def format_number(cls, seq: int) -> str:
        return f"{cls.NUMBER_PREFIX}-{seq:0{cls.NUMBER_WIDTH}d}"

    @classmethod
    def next_number(cls, project_id: int) -> str:
        """
        Next project-scoped number: count of existing rows + 1.

        Not race-safe on its own. The (project_id, number) unique constraint
        on numbered tables turns a concurrent collision into an IntegrityError,
        which ``create_numbered`` retries.
        """
        if not cls.NUMBER_PREFIX:
            raise TypeError(f"{cls.__name__} is not a numbered model")
        count = cls.query_for_project(project_id).count()
        return cls.format_number(count + 1)
