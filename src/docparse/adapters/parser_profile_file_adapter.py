import os
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ValidationError

from docparse.core.interfaces.parser_profile import ParserProfilePort
from docparse.core.settings import logger


class ParserProfile(BaseModel):
    model_config = {"extra": "forbid"}

    upload_options: Optional[Dict[str, Any]] = None
    pending_markers: Optional[List[str]] = None
    not_ready_statuses: Optional[List[int]] = None


class ParserProfileFileAdapter(ParserProfilePort):
    """Loads a parser profile from a YAML file.

    Example file:

        upload_options:
          tier: agentic_plus
          high_res_ocr: true
        pending_markers:
          - Job not completed yet
          - Result for Parsing Job
    """

    def __init__(self, config_path: Optional[str]):
        self._config_path = config_path

    def load_profile(self) -> Dict[str, Any]:
        if not self._config_path:
            return {}
        if not os.path.exists(self._config_path):
            logger.warning("Parser profile file not found: %s; using defaults", self._config_path)
            return {}

        with open(self._config_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        try:
            profile = ParserProfile.model_validate(raw)
        except ValidationError as e:
            logger.error("Invalid parser profile %s: %s", self._config_path, e)
            raise ValueError(f"Invalid parser profile {self._config_path}") from e

        logger.info(
            "Loaded parser profile %s options=%s markers=%s",
            self._config_path,
            sorted((profile.upload_options or {}).keys()),
            len(profile.pending_markers or []),
        )
        return profile.model_dump(exclude_none=True)
