"""Runtime configuration for translation updates."""

from pathlib import Path
from typing import Optional

from pydantic import Field

from .utils.config_loader import BaseConfig, get_project_root

DEFAULT_CONFIG_FILE = "configs/default.yaml"

TRANSLATE_BASE_URL = "https://translate.wordpress.org"


class SyncConfig(BaseConfig):
    """Settings for downloading and compiling translations."""

    # Remote service
    base_url: str = TRANSLATE_BASE_URL
    user_agent: str = "TranslationStats/1.0 (+https://translate.wordpress.org)"

    # HTTP behaviour
    timeout: float = Field(30.0, gt=0)
    requests_per_minute: int = Field(30, gt=0)
    max_retries: int = Field(3, ge=1)
    backoff_min: float = Field(2.0, ge=0)
    backoff_max: float = Field(30.0, ge=0)

    # Whole pipeline deadline in seconds, None for no deadline
    deadline: Optional[float] = Field(None, gt=0)

    # Local files
    destination: str = "./languages"

    # Logging; debug forces DEBUG on the console
    log_level: str = Field("WARNING", pattern=r"(?i)^(debug|info|warning|error|critical)$")
    log_file: Optional[str] = None

    # Debug display
    debug: bool = False
    settings_page: str = "translation-stats"
    settings_file: str = "./data/settings.yaml"
    option_name: str = "tstats_settings"
    transients_dir: str = "./data/transients"
    transients_prefix: str = "translation_stats_"
    transient_expiration: int = Field(86400, ge=0)

    @property
    def destination_path(self) -> Path:
        return Path(self.destination)

    @classmethod
    def load(cls, path: Optional[str | Path] = None, **overrides) -> "SyncConfig":
        """Load from ``path``, falling back to the bundled default file.

        Missing default file means built-in defaults.
        """
        if path is None:
            default = get_project_root() / DEFAULT_CONFIG_FILE
            if not default.exists():
                return cls(**{k: v for k, v in overrides.items() if v is not None})
            path = default
        return cls.from_yaml(path, **overrides)
