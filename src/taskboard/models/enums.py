"""Shared enums for models."""

from enum import Enum


class Role(str, Enum):
    """System-wide role tier. MASTER ⊃ ADMIN ⊃ USER."""

    MASTER = "MASTER"
    ADMIN = "ADMIN"
    USER = "USER"


class UserStatus(str, Enum):
    """Account status."""

    ACTIVE = "active"
    SUSPENDED = "suspended"


class ProjectStatus(str, Enum):
    ACTIVE = "active"
    ON_HOLD = "on-hold"
    COMPLETED = "completed"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"


class NotificationType(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


class ThemeColor(str, Enum):
    BLUE = "blue"
    GREEN = "green"
    VIOLET = "violet"
    ROSE = "rose"
    ORANGE = "orange"


class LayoutDensity(str, Enum):
    COMFORTABLE = "comfortable"
    COMPACT = "compact"


class Language(str, Enum):
    PT_BR = "pt-BR"
    EN_US = "en-US"
