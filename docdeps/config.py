"""Environment-driven settings for docdeps."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

PROJECT_ROOT_ENV = "DOCDEPS_PROJECT_ROOT"
STORAGE_DIR_ENV = "DOCDEPS_STORAGE_DIR"
OUTPUT_DIR_ENV = "DOCDEPS_OUTPUT_DIR"
REGISTRY_PATH_ENV = "DOCDEPS_REGISTRY_PATH"
LOG_LEVEL_ENV = "DOCDEPS_LOG_LEVEL"
LOG_FILE_ENV = "DOCDEPS_LOG_FILE"

DEFAULT_STORAGE_DIR = ".docdeps"
DEFAULT_OUTPUT_DIR = "generated-documents"


@dataclass(slots=True)
class Settings:
    project_root: Optional[Path] = None
    storage_dir: str = DEFAULT_STORAGE_DIR
    output_dir: str = DEFAULT_OUTPUT_DIR
    registry_path: Optional[Path] = None
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ

        def path_or_none(name: str) -> Optional[Path]:
            value = env.get(name)
            return Path(value).expanduser() if value else None

        return cls(
            project_root=path_or_none(PROJECT_ROOT_ENV),
            storage_dir=env.get(STORAGE_DIR_ENV) or DEFAULT_STORAGE_DIR,
            output_dir=env.get(OUTPUT_DIR_ENV) or DEFAULT_OUTPUT_DIR,
            registry_path=path_or_none(REGISTRY_PATH_ENV),
            log_level=(env.get(LOG_LEVEL_ENV) or "INFO").upper(),
            log_file=path_or_none(LOG_FILE_ENV),
        )
