import enum
from typing import Optional, Union
from sqlalchemy import Column, Integer, String, Enum, ForeignKey
from sqlalchemy.orm import relationship
from jobly.core.database import Base
from jobly.core.exceptions import ValidationError


class ApplicationState(str, enum.Enum):
    """
    Status of a user's relationship to a job.

    - APPLIED: default when a user applies without naming a state
    - INTERESTED: user is tracking the job
    - ACCEPTED: offer accepted
    - REJECTED: application rejected

    There are no implicit transitions; any state may be set explicitly.
    """
    APPLIED = "applied"
    INTERESTED = "interested"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


def resolve_application_state(requested: Optional[Union[str, ApplicationState]] = None) -> ApplicationState:
    """
    Validate a requested application state.

    Args:
        requested: State name, or None for the default

    Returns:
        ApplicationState (APPLIED when nothing was requested)

    Raises:
        ValidationError: If the value is not one of the known states
    """
    if requested is None:
        return ApplicationState.APPLIED
    try:
        return ApplicationState(requested)
    except ValueError:
        allowed = ", ".join(s.value for s in ApplicationState)
        raise ValidationError(f"Invalid application state '{requested}'. Must be one of: {allowed}")


class Application(Base):
    """
    A user's application to a job, keyed by (username, job_id).
    Removed only by cascade when the user or job is deleted.
    """
    __tablename__ = "applications"

    username = Column(
        String(25),
        ForeignKey("users.username", ondelete="CASCADE"),
        primary_key=True
    )
    job_id = Column(
        Integer,
        ForeignKey("jobs.id", ondelete="CASCADE"),
        primary_key=True
    )
    state = Column(
        Enum(
            ApplicationState,
            name="application_state",
            values_callable=lambda states: [s.value for s in states],
        ),
        nullable=False,
        default=ApplicationState.APPLIED,
        server_default=ApplicationState.APPLIED.value,
    )

    # Relationships
    user = relationship("User", back_populates="applications")
    job = relationship("Job", back_populates="applications")

    def __repr__(self):
        return f"<Application(username='{self.username}', job_id={self.job_id}, state={self.state.value})>"
