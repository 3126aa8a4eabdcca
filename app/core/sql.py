"""
Builders for parameterized SQL fragments.

Both builders interpolate only identifiers and operators taken from tables
the caller supplies (a field-name map or a filter table). Every value is
returned separately and bound by position, so the Nth $N placeholder in a
fragment always refers to the Nth entry of its value list.
"""

import logging
from typing import Any, Callable, Mapping, NamedTuple, Optional, Tuple

from app.core.errors import EmptyUpdateError

logger = logging.getLogger(__name__)


class SqlFragment(NamedTuple):
    """Clause text plus the values its $1..$N placeholders refer to."""
    clause: str
    values: Tuple[Any, ...]


class FilterRule(NamedTuple):
    """
    One supported filter of an entity.

    template: SQL condition with a {} marker where the placeholder goes,
        e.g. "num_employees >= {}".
    transform: optional callable applied to the raw filter value. Returning
        None drops the filter from the clause.
    """
    template: str
    transform: Optional[Callable[[Any], Any]] = None


def build_set_clause(data: Mapping[str, Any], field_map: Optional[Mapping[str, str]] = None) -> SqlFragment:
    """
    Build the SET part of a partial UPDATE.

    Keys are translated through field_map (unmapped keys are used as-is) and
    emitted in the payload's order:

        {"firstName": "Aliya", "age": 32}, {"firstName": "first_name"}
        -> '"first_name"=$1, "age"=$2', ("Aliya", 32)

    Values, None included, are passed through untouched.

    Raises:
        EmptyUpdateError: If data has no keys
    """
    if not data:
        raise EmptyUpdateError("No data")

    field_map = field_map or {}
    columns = []
    values = []
    for idx, (key, value) in enumerate(data.items(), start=1):
        columns.append(f'"{field_map.get(key, key)}"=${idx}')
        values.append(value)

    return SqlFragment(", ".join(columns), tuple(values))


def build_where_clause(filters: Mapping[str, Any], rules: Mapping[str, FilterRule]) -> SqlFragment:
    """
    Build the condition of a filtered SELECT, without the WHERE keyword.

    Keys without a rule and keys whose value is None are skipped. Each rule's
    transform runs first; filters it drops are removed before placeholders
    are numbered, so the numbering has no gaps.

    Returns:
        SqlFragment whose clause is empty when no filter applies
    """
    conditions = []
    for key, raw in filters.items():
        rule = rules.get(key)
        if rule is None:
            logger.debug(f"Ignoring unsupported filter: {key}")
            continue
        if raw is None:
            continue
        value = rule.transform(raw) if rule.transform else raw
        if value is None:
            continue
        conditions.append((rule.template, value))

    clause = " AND ".join(
        template.format(f"${idx}") for idx, (template, _) in enumerate(conditions, start=1)
    )
    return SqlFragment(clause, tuple(value for _, value in conditions))


def where_sql(fragment: SqlFragment) -> str:
    """Prefix a non-empty condition with WHERE; empty conditions yield ''."""
    return f"WHERE {fragment.clause}" if fragment.clause else ""


def contains_pattern(value: Any) -> str:
    """Wrap a substring filter in wildcards: "bak" -> "%bak%"."""
    return f"%{value}%"


def positive_threshold(value: Any) -> Optional[int]:
    """
    Turn a boolean-presence flag into a "greater than zero" threshold.

    Falsy values and the string "false" drop the filter.
    """
    if not value or (isinstance(value, str) and value.strip().lower() == "false"):
        return None
    return 0
