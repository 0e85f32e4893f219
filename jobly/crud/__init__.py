"""
Repositories for companies, jobs and users.

Each module wraps the SQL for one entity and composes the fragment builders
in jobly.core.sql; none of them build WHERE or SET clauses by hand.
"""

from jobly.crud import company, job, user

__all__ = ["company", "job", "user"]
