from abc import ABC, abstractmethod
from typing import Any, Dict


class ParserProfilePort(ABC):
    """Source of service options that are passed through to the parsing API.

    A profile is a mapping with the optional keys `upload_options`,
    `pending_markers` and `not_ready_statuses`.
    """

    @abstractmethod
    def load_profile(self) -> Dict[str, Any]:
        pass
