from enum import IntEnum

MAX_STATUS = 4
INVALID_STATUS_LABEL = "Error: Invalid Status"


class StatusCode(IntEnum):
    AVAILABLE = 0
    UPCOMING = 1
    IN_PROGRESS = 2
    COMPLETED = 3
    CANCELED = 4


_LABELS = {
    StatusCode.AVAILABLE: "Available",
    StatusCode.UPCOMING: "Upcoming",
    StatusCode.IN_PROGRESS: "In Progress",
    StatusCode.COMPLETED: "Completed",
    StatusCode.CANCELED: "Canceled",
}

_CODES = {label: int(code) for code, label in _LABELS.items()}

_BADGE_CLASSES = {
    StatusCode.AVAILABLE: "badge-primary",
    StatusCode.UPCOMING: "badge-info",
    StatusCode.IN_PROGRESS: "badge-dark",
    StatusCode.COMPLETED: "badge-success",
    StatusCode.CANCELED: "badge-danger",
}


def _lookup(table: dict, code, default: str) -> str:
    # bool is an int subclass but never a status
    if isinstance(code, bool) or not isinstance(code, int):
        return default
    return table.get(code, default)


def label_of(code) -> str:
    return _lookup(_LABELS, code, INVALID_STATUS_LABEL)


def code_of(label) -> int:
    if not isinstance(label, str):
        return -1
    return _CODES.get(label, -1)


def badge_class_of(code) -> str:
    return _lookup(_BADGE_CLASSES, code, "")
