"""
User-facing notifications raised by the recorder and workspace.
"""
from dataclasses import dataclass
from typing import Callable, List, Optional

INFO = "info"
ERROR = "error"


@dataclass
class Notice:
    title: str
    description: str = ""
    level: str = INFO

    @property
    def is_error(self) -> bool:
        return self.level == ERROR

    def __str__(self) -> str:
        if self.description:
            return f"{self.title}: {self.description}"
        return self.title


class NoticeBoard:
    """Collects notices and forwards each one to an optional listener."""

    def __init__(self, listener: Optional[Callable[[Notice], None]] = None):
        self.listener = listener
        self.notices: List[Notice] = []

    def post(self, title: str, description: str = "", level: str = INFO) -> Notice:
        notice = Notice(title=title, description=description, level=level)
        self.notices.append(notice)
        if self.listener:
            self.listener(notice)
        return notice

    def error(self, title: str, description: str = "") -> Notice:
        return self.post(title, description, ERROR)

    @property
    def errors(self) -> List[Notice]:
        return [n for n in self.notices if n.is_error]
