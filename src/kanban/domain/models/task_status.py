from enum import Enum

from src.kanban.domain.exceptions import ValidationError


class TaskStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"

    @classmethod
    def parse(cls, value: object) -> "TaskStatus":
        """Decode a raw status tag, rejecting anything outside the three known values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(member.value for member in cls)
            raise ValidationError(
                f"Invalid status: {value}. Must be one of: {allowed}", field="status"
            ) from None
