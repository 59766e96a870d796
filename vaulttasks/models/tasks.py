from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class TaskStatus(str, Enum):
    INCOMPLETE = "incomplete"
    COMPLETE = "complete"
    CANCELLED = "cancelled"
    IN_PROGRESS = "in_progress"
    NON_TASK = "non_task"


class Priority(str, Enum):
    HIGHEST = "highest"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    LOWEST = "lowest"


class Task(BaseModel):
    """One checkbox item recognized in a Markdown line.

    Serialized with camelCase keys (``filePath``, ``lineNumber``, ...).
    Absent dates, priority and recurrence are ``None``, never ``""``.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    description: str
    status: TaskStatus
    status_symbol: str
    file_path: str
    line_number: int = Field(ge=0)
    tags: list[str] = Field(default_factory=list)
    due_date: str | None = None
    scheduled_date: str | None = None
    start_date: str | None = None
    created_date: str | None = None
    priority: Priority | None = None
    recurrence: str | None = None
    original_markdown: str

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ListTasksResponse(BaseModel):
    tasks: list[Task]
    result_count: int


class QueryTasksRequest(BaseModel):
    query: str
    path: str | None = None
