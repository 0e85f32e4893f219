from sqlalchemy import Column, Integer, Numeric, Text, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from jobly.core.database import Base


class Job(Base):
    """
    Job posting belonging to a company.
    """
    __tablename__ = "jobs"
    __table_args__ = (
        CheckConstraint("salary >= 0", name="ck_jobs_salary"),
        CheckConstraint("equity <= 1.0", name="ck_jobs_equity"),
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(Text, nullable=False, index=True)
    salary = Column(Integer, nullable=True)
    equity = Column(Numeric, nullable=True)
    company_handle = Column(
        Text,
        ForeignKey("companies.handle", ondelete="CASCADE"),
        nullable=False
    )

    # Relationships
    company = relationship("Company", back_populates="jobs")
    applications = relationship("Application", back_populates="job", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<Job(id={self.id}, title='{self.title}', company_handle='{self.company_handle}')>"
