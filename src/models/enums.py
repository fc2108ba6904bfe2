from enum import Enum


class UserKind(str, Enum):
    GUEST = "guest"
    REGISTERED = "registered"


class AttemptState(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
