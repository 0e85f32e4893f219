from sqlalchemy import Column, Integer, String, Text, CheckConstraint
from sqlalchemy.orm import relationship
from jobly.core.database import Base


class Company(Base):
    """
    Company posting jobs on the board.
    The handle is the natural key used in URLs; listings sort by name.
    """
    __tablename__ = "companies"
    __table_args__ = (
        CheckConstraint("num_employees >= 0", name="ck_companies_num_employees"),
    )

    handle = Column(String(25), primary_key=True)
    name = Column(Text, unique=True, nullable=False, index=True)
    num_employees = Column(Integer, nullable=True)
    description = Column(Text, nullable=False)
    logo_url = Column(Text, nullable=True)

    # Relationships
    jobs = relationship("Job", back_populates="company", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<Company(handle='{self.handle}', name='{self.name}')>"
