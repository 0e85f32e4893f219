"""
Dynamic SQL fragment builders.

Two query shapes are supported:
- partial UPDATE: a SET clause built from a sparse dict of fields
- filtered SELECT: a WHERE clause built from independently optional filters

Placeholders use the positional "$n" style; run_query() in
jobly.core.database binds them. Values are always bound, never interpolated.
Column names are interpolated, so only field names that passed pydantic
validation (extra="forbid") may reach these builders.
"""

from types import MappingProxyType
from typing import Any, List, Mapping, NamedTuple, Optional

from jobly.core.exceptions import ValidationError
from jobly.schemas.company import CompanyFilter
from jobly.schemas.job import JobFilter

# External (camelCase) field name -> persisted column name
COMPANY_COLUMNS = MappingProxyType({
    "numEmployees": "num_employees",
    "logoUrl": "logo_url",
})
JOB_COLUMNS = MappingProxyType({
    "companyHandle": "company_handle",
})
USER_COLUMNS = MappingProxyType({
    "firstName": "first_name",
    "lastName": "last_name",
    "isAdmin": "is_admin",
})


def resolve_column(field: str, aliases: Optional[Mapping[str, str]] = None) -> str:
    """Return the column for an external field name, or the name itself if unmapped."""
    if aliases is None:
        return field
    return aliases.get(field, field)


class PartialUpdate(NamedTuple):
    """SET clause fragments and their aligned values."""
    assignments: List[str]
    values: List[Any]

    @property
    def set_cols(self) -> str:
        return ", ".join(self.assignments)

    @property
    def next_placeholder(self) -> str:
        """Placeholder for the first parameter after the SET values (the WHERE key)."""
        return f"${len(self.values) + 1}"


def sql_for_partial_update(
    data: Mapping[str, Any],
    aliases: Optional[Mapping[str, str]] = None
) -> PartialUpdate:
    """
    Build the SET clause for an UPDATE touching only the supplied fields.

    Args:
        data: Field name -> new value, in the order the assignments should appear
        aliases: Optional external name -> column name table

    Returns:
        PartialUpdate whose assignment i (1-based) reads '"column"=$i'

    Raises:
        ValidationError: If data is empty

    Example:
        >>> sql_for_partial_update({"firstName": "Aliya", "age": 32},
        ...                        {"firstName": "first_name"}).set_cols
        '"first_name"=$1, "age"=$2'
    """
    if not data:
        raise ValidationError("No data to update")

    assignments = []
    values = []
    for idx, (field, value) in enumerate(data.items(), start=1):
        assignments.append(f'"{resolve_column(field, aliases)}"=${idx}')
        values.append(value)

    return PartialUpdate(assignments, values)


class WhereClause:
    """
    Accumulates conjunctive predicates and their bound values.

    Each placeholder number is the 1-based position its value takes in
    `values` at the moment it is bound, so numbering follows call order.
    """

    def __init__(self):
        self.predicates: List[str] = []
        self.values: List[Any] = []

    def bind(self, value: Any) -> str:
        self.values.append(value)
        return f"${len(self.values)}"

    def at_least(self, column: str, value: Any) -> "WhereClause":
        self.predicates.append(f"{column} >= {self.bind(value)}")
        return self

    def at_most(self, column: str, value: Any) -> "WhereClause":
        self.predicates.append(f"{column} <= {self.bind(value)}")
        return self

    def positive(self, column: str) -> "WhereClause":
        self.predicates.append(f"{column} > 0")
        return self

    def contains(self, column: str, text: str) -> "WhereClause":
        """Case-insensitive, unanchored substring match."""
        self.predicates.append(f"{column} ILIKE {self.bind(f'%{text}%')}")
        return self

    def render(self) -> str:
        """' WHERE a AND b' or an empty string when nothing was added."""
        if not self.predicates:
            return ""
        return " WHERE " + " AND ".join(self.predicates)

    def __bool__(self) -> bool:
        return bool(self.predicates)


def check_range(minimum: Optional[int], maximum: Optional[int], message: str) -> None:
    """Reject a min/max pair where both are set and min exceeds max."""
    if minimum is not None and maximum is not None and minimum > maximum:
        raise ValidationError(message)


def company_filters(filters: Optional[CompanyFilter] = None) -> WhereClause:
    """
    WHERE clause for company search.

    Evaluation order (fixes placeholder numbering): maxEmployees,
    minEmployees, name.
    """
    where = WhereClause()
    if filters is None:
        return where

    check_range(
        filters.min_employees,
        filters.max_employees,
        "Minimum employee number cannot be greater than maximum employee number."
    )

    if filters.max_employees is not None:
        where.at_most("num_employees", filters.max_employees)
    if filters.min_employees is not None:
        where.at_least("num_employees", filters.min_employees)
    if filters.name:
        where.contains("name", filters.name)

    return where


def job_filters(filters: Optional[JobFilter] = None) -> WhereClause:
    """
    WHERE clause for job search.

    Evaluation order: minSalary, hasEquity, title. hasEquity=False adds no
    constraint.
    """
    where = WhereClause()
    if filters is None:
        return where

    if filters.min_salary is not None:
        where.at_least("salary", filters.min_salary)
    if filters.has_equity:
        where.positive("equity")
    if filters.title is not None:
        where.contains("title", filters.title)

    return where
