"""
User model for authentication and job applications.

Users are identified by username; is_admin grants access to the
company/job write endpoints and to every user's data.
"""

from sqlalchemy import Column, String, Text, Boolean, false
from sqlalchemy.orm import relationship
from jobly.core.database import Base


class User(Base):
    __tablename__ = "users"

    username = Column(String(25), primary_key=True)
    password = Column(Text, nullable=False)  # bcrypt hash
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False, server_default=false())

    # Relationships
    applications = relationship("Application", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<User(username='{self.username}', is_admin={self.is_admin})>"
