"""Recognize Obsidian Tasks checkbox lines and pull their emoji metadata."""

import re

from vaulttasks.models.tasks import Priority, Task, TaskStatus

# indentation (incl. blockquote/callout '>'), list marker, checkbox, rest of line
TASK_RE = re.compile(r"^([\s>]*)([-*+]|[0-9]+[.)]) +\[(.)\](.*)$")

HASHTAG_RE = re.compile(r"(?:^|\s)(#[^ !@#$%^&*(),.?\":{}|<>]+)")

_DATE = r"\s*(\d{4}-\d{2}-\d{2})"
DUE_DATE_RE = re.compile("(?:📅|🗓\ufe0f?)" + _DATE)
SCHEDULED_DATE_RE = re.compile("⏳\ufe0f?" + _DATE)
START_DATE_RE = re.compile(r"🛫" + _DATE)
CREATED_DATE_RE = re.compile(r"➕" + _DATE)

# "⏫⏫" must be tried before "⏫" so the doubled form wins at the same position
PRIORITY_RE = re.compile(r"⏫⏫|⏫|🔼|🔽|⏬")
PRIORITY_MARKERS = {
    "⏫⏫": Priority.HIGHEST,
    "⏫": Priority.HIGH,
    "🔼": Priority.MEDIUM,
    "🔽": Priority.LOW,
    "⏬": Priority.LOWEST,
}

RECURRENCE_RE = re.compile(r"🔁\s?(.*?)(?=\s|$)")

STATUS_SYMBOLS = {
    "x": TaskStatus.COMPLETE,
    "X": TaskStatus.COMPLETE,
    "-": TaskStatus.CANCELLED,
    "/": TaskStatus.IN_PROGRESS,
    " ": TaskStatus.INCOMPLETE,
    ">": TaskStatus.INCOMPLETE,
    "<": TaskStatus.INCOMPLETE,
}


def status_for_symbol(symbol: str) -> TaskStatus:
    return STATUS_SYMBOLS.get(symbol, TaskStatus.NON_TASK)


def extract_tags(description: str) -> list[str]:
    return HASHTAG_RE.findall(description)


def _first_group(pattern: re.Pattern, text: str) -> str | None:
    match = pattern.search(text)
    return match.group(1) if match else None


def extract_priority(description: str) -> Priority | None:
    """Priority of the leftmost marker in the text, not the most severe one."""
    match = PRIORITY_RE.search(description)
    return PRIORITY_MARKERS[match.group(0)] if match else None


def extract_recurrence(description: str) -> str | None:
    return _first_group(RECURRENCE_RE, description) or None


def parse_task_line(line: str, file_path: str, line_number: int) -> Task | None:
    """Turn one line into a Task, or return None if it has no list checkbox.

    Lines with an unknown checkbox symbol still come back, with status
    ``non_task``, so callers can filter them explicitly.
    """
    match = TASK_RE.match(line)
    if not match:
        return None

    symbol = match.group(3)
    description = match.group(4).strip()

    return Task(
        id=f"{file_path}:{line_number}",
        description=description,
        status=status_for_symbol(symbol),
        status_symbol=symbol,
        file_path=file_path,
        line_number=line_number,
        tags=extract_tags(description),
        due_date=_first_group(DUE_DATE_RE, description),
        scheduled_date=_first_group(SCHEDULED_DATE_RE, description),
        start_date=_first_group(START_DATE_RE, description),
        created_date=_first_group(CREATED_DATE_RE, description),
        priority=extract_priority(description),
        recurrence=extract_recurrence(description),
        original_markdown=line,
    )


def parse_tasks(text: str, file_path: str) -> list[Task]:
    """Recognize every task in a document. Line numbers are 0-based."""
    tasks = []
    for line_number, line in enumerate(text.split("\n")):
        task = parse_task_line(line.removesuffix("\r"), file_path, line_number)
        if task is not None:
            tasks.append(task)
    return tasks
