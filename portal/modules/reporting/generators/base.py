"""Abstract base class for export generators."""

from abc import ABC, abstractmethod
from datetime import datetime, timezone


class BaseReportGenerator(ABC):
    """Base class for export generators.

    ``data`` maps section names to either a list of row dicts (a table) or
    a dict (key/value pairs); ``sections`` lists which sections to emit and
    in what order.
    """

    def __init__(self, title: str, brand_color: str = "#1E3A5F") -> None:
        self.title = title
        self.brand_color = brand_color
        self.generated_at: str = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")

    @abstractmethod
    def generate(self, data: dict, sections: list[dict]) -> tuple[bytes, str]:
        """Generate export bytes and content type.

        Returns:
            Tuple of (file_bytes, content_type).
        """

    def _header_label(self, key: str) -> str:
        return key.replace("_", " ").title()
