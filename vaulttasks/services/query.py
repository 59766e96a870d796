"""Obsidian Tasks style query language over extracted tasks.

A query is one clause per line; a task must satisfy every line. Within a line
clauses combine with ``and`` / ``or`` / ``not`` by plain string splitting:
``and`` is split first, then ``or``, then a leading ``not``. There are no
parentheses. Clauses that match no known predicate search the description.

Each clause is compiled once into a predicate object and then evaluated
against every task.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date

from vaulttasks.models.tasks import Priority, Task, TaskStatus

logger = logging.getLogger(__name__)

ISO_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")
DUE_RE = re.compile(r"^due(?: (before|after|on))? (.+)$")
TAG_EXCLUDES_RE = re.compile(r"^tags? (?:does not|do not) include (.+)$")
TAG_INCLUDES_RE = re.compile(r"^tags? includes? (.+)$")
TEXT_FIELD_RE = re.compile(r"^(path|description) (does not include|includes) (.+)$")
PRIORITY_RE = re.compile(r"^priority is (.+)$")

STATUS_CLAUSES = {
    "done": frozenset({TaskStatus.COMPLETE}),
    "not done": frozenset({TaskStatus.INCOMPLETE, TaskStatus.IN_PROGRESS}),
    "cancelled": frozenset({TaskStatus.CANCELLED}),
    "in progress": frozenset({TaskStatus.IN_PROGRESS}),
}


# --- Predicates ---


class Predicate:
    def matches(self, task: Task, today: str) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class AllOf(Predicate):
    parts: tuple[Predicate, ...]

    def matches(self, task, today):
        return all(part.matches(task, today) for part in self.parts)


@dataclass(frozen=True)
class AnyOf(Predicate):
    parts: tuple[Predicate, ...]

    def matches(self, task, today):
        return any(part.matches(task, today) for part in self.parts)


@dataclass(frozen=True)
class Not(Predicate):
    inner: Predicate

    def matches(self, task, today):
        return not self.inner.matches(task, today)


@dataclass(frozen=True)
class Never(Predicate):
    """Stands in for a clause with an invalid argument."""

    reason: str

    def matches(self, task, today):
        return False


@dataclass(frozen=True)
class StatusIn(Predicate):
    statuses: frozenset[TaskStatus]

    def matches(self, task, today):
        return task.status in self.statuses


@dataclass(frozen=True)
class HasDueDate(Predicate):
    present: bool

    def matches(self, task, today):
        return (task.due_date is not None) == self.present


@dataclass(frozen=True)
class DueCompare(Predicate):
    """Compare the due date against a fixed date, or today when ``on_date`` is None.

    Plain string comparison is enough because both sides are zero-padded
    ``YYYY-MM-DD``.
    """

    op: str
    on_date: str | None = None

    def matches(self, task, today):
        if task.due_date is None:
            return False
        target = self.on_date or today
        if self.op == "before":
            return task.due_date < target
        if self.op == "after":
            return task.due_date > target
        return task.due_date == target


@dataclass(frozen=True)
class HasTags(Predicate):
    present: bool

    def matches(self, task, today):
        return bool(task.tags) == self.present


@dataclass(frozen=True)
class HasTag(Predicate):
    name: str

    def matches(self, task, today):
        return any(tag.removeprefix("#").lower() == self.name for tag in task.tags)


@dataclass(frozen=True)
class TagIncludes(Predicate):
    text: str
    negate: bool = False

    def matches(self, task, today):
        found = any(self.text in tag.removeprefix("#").lower() for tag in task.tags)
        return found != self.negate


@dataclass(frozen=True)
class TextIncludes(Predicate):
    field: str  # "path" or "description"
    text: str
    negate: bool = False

    def matches(self, task, today):
        value = task.file_path if self.field == "path" else task.description
        return (self.text in value.lower()) != self.negate


@dataclass(frozen=True)
class PriorityIs(Predicate):
    level: Priority | None

    def matches(self, task, today):
        return task.priority == self.level


# --- Parsing ---


def parse_query(query_text: str) -> list[str]:
    """Split a query into clause lines, dropping blanks and ``#`` comments."""
    lines = (line.strip() for line in query_text.split("\n"))
    return [line for line in lines if line and not line.startswith("#")]


def _parse_date_arg(arg: str) -> str | None:
    if not ISO_DATE_RE.fullmatch(arg):
        return None
    try:
        date.fromisoformat(arg)
    except ValueError:
        return None
    return arg


def _parse_due(op: str | None, arg: str) -> Predicate:
    op = op or "on"
    if arg == "today":
        return DueCompare(op)
    on_date = _parse_date_arg(arg)
    if on_date is None:
        return Never(f"not a YYYY-MM-DD date: {arg!r}")
    return DueCompare(op, on_date)


def _parse_priority(level: str) -> Predicate:
    if level == "none":
        return PriorityIs(None)
    try:
        return PriorityIs(Priority(level))
    except ValueError:
        return Never(f"unknown priority: {level!r}")


def _parse_predicate(clause: str) -> Predicate:
    if clause in STATUS_CLAUSES:
        return StatusIn(STATUS_CLAUSES[clause])

    if clause == "has due date":
        return HasDueDate(True)
    if clause == "no due date":
        return HasDueDate(False)
    if m := DUE_RE.match(clause):
        return _parse_due(m.group(1), m.group(2).strip())

    if clause == "has tags":
        return HasTags(True)
    if clause == "no tags":
        return HasTags(False)
    if clause.startswith("has tag "):
        return HasTag(clause[len("has tag "):].strip().removeprefix("#"))
    # the negative form also contains "include", so it is checked first
    if m := TAG_EXCLUDES_RE.match(clause):
        return TagIncludes(m.group(1).strip().removeprefix("#"), negate=True)
    if m := TAG_INCLUDES_RE.match(clause):
        return TagIncludes(m.group(1).strip().removeprefix("#"))

    if m := TEXT_FIELD_RE.match(clause):
        return TextIncludes(m.group(1), m.group(3).strip(), negate=m.group(2) != "includes")

    if m := PRIORITY_RE.match(clause):
        return _parse_priority(m.group(1).strip())

    logger.debug("No predicate for %r, searching descriptions", clause)
    return TextIncludes("description", clause)


def parse_clause(clause: str) -> Predicate:
    """Compile one query line into a predicate.

    ``and`` is split before ``or``, so ``a or b and c`` means
    ``(a or b) and c``. ``not done`` is a status predicate of its own
    (incomplete or in progress) rather than the negation of ``done``.
    """
    clause = clause.lower().strip()

    if " and " in clause:
        return AllOf(tuple(parse_clause(part) for part in clause.split(" and ")))
    if " or " in clause:
        return AnyOf(tuple(parse_clause(part) for part in clause.split(" or ")))
    if clause.startswith("not ") and clause not in STATUS_CLAUSES:
        return Not(parse_clause(clause[len("not "):]))

    return _parse_predicate(clause)


# --- Evaluation ---


def _today_str(today: date | str | None) -> str:
    if today is None:
        return date.today().isoformat()
    if isinstance(today, date):
        return today.isoformat()
    return today


def evaluate_clause(task: Task, clause: str, today: date | str | None = None) -> bool:
    return parse_clause(clause).matches(task, _today_str(today))


def evaluate_query(tasks: list[Task], query_text: str, today: date | str | None = None) -> list[Task]:
    """Keep the tasks that satisfy every clause line of the query."""
    predicates = [parse_clause(line) for line in parse_query(query_text)]
    today = _today_str(today)
    return [task for task in tasks if all(p.matches(task, today) for p in predicates)]
