"""
clipstash.config
Configuration and settings management for clipstash.
Overview:
- Provides Pydantic-based settings classes for the monitor daemon, the browser and
    logging. Each settings class inherits from FactoryBaseSettings and supports
    environment variable overrides via Field aliases.
- Provides the user config file model and manager (config.json written by
    `clipstash setup` and `clipstash db`).
- Provides the pure database path resolution function.
Contents:
- Settings Classes:
    - MonitorSettings: poll interval, clipboard read timeout, settle delay and minimum
        content length for the daemon.
    - BrowserSettings: transient message timeout and mouse click windows.
    - LogSettings: log level, log directory and number of archives kept.
- User Config:
    - UserConfig: Pydantic model of config.json.
    - ConfigManager: load/save/exists for config.json and database path lookup.
- Functions:
    - resolve_db_path(env, file_config, default) -> Path:
        Priority: CLIPSTASH_DB_PATH > config.json db_path > built-in default.
    - expand_db_path(raw, home) -> Path: interpret a path given on the command line.
    - get_settings: Factory function for retrieving settings instances (exported).
Design Notes:
- Default values are provided for all fields, enabling zero-configuration startup.
- The database path is not a settings field; it only resolves through resolve_db_path.
"""

from clipstash.imports import (
    json,
    os,
    Path,
    Any,
    Mapping,
    Optional,
    BaseModel,
    Field,
    ValidationError,
    field_validator,
)
from clipstash.errors import ConfigError
from clipstash.config.base import AppEnv
from clipstash.config.factory import FactoryBaseSettings
from clipstash.config.factory import get_settings  # noqa: F401  This is used externally

DB_PATH_ENV_VAR = "CLIPSTASH_DB_PATH"
"""Environment variable overriding the database location."""


# region Settings


class MonitorSettings(FactoryBaseSettings):
    """
    Configuration for the clipboard monitor daemon.
    """

    poll_interval: float = Field(
        default=1.0,
        alias="CLIPSTASH_POLL_INTERVAL",
        description="Interval for polling the clipboard. (Seconds) [Default: 1.0]",
        gt=0,
    )
    read_timeout: float = Field(
        default=2.0,
        alias="CLIPSTASH_READ_TIMEOUT",
        description="Upper bound for a single clipboard read. (Seconds) [Default: 2.0]",
        gt=0,
    )
    settle_delay: float = Field(
        default=0.0,
        alias="CLIPSTASH_SETTLE_DELAY",
        description="Wait this long and re-read before recording a change; 0 disables. (Seconds)",
        ge=0,
    )
    min_length: int = Field(
        default=1,
        alias="CLIPSTASH_MIN_LENGTH",
        description="Minimum length of the stripped content to record.",
        ge=1,
    )


class BrowserSettings(FactoryBaseSettings):
    """
    Configuration for the interactive browser.
    """

    message_timeout: float = Field(
        default=2.0,
        alias="CLIPSTASH_MESSAGE_TIMEOUT",
        description="How long transient status messages stay visible. (Seconds)",
        gt=0,
    )
    double_click_window: float = Field(
        default=0.4,
        alias="CLIPSTASH_DOUBLE_CLICK_WINDOW",
        description="Two clicks on the same row within this window activate it. (Seconds)",
        gt=0,
    )
    click_lock_window: float = Field(
        default=0.05,
        alias="CLIPSTASH_CLICK_LOCK_WINDOW",
        description="Clicks arriving within this window of the previous one are ignored. (Seconds)",
        ge=0,
    )


class LogSettings(FactoryBaseSettings):
    """
    Logging configuration settings.
    """

    log_level: str = Field(
        default="info",
        alias="CLIPSTASH_LOG_LEVEL",
        description="Log level for clipstash.",
    )
    log_dir: Path = Field(
        default_factory=lambda: AppEnv.data_dir() / "logs",
        alias="CLIPSTASH_LOG_DIR",
        description="Directory where the JSON log file and its archives are written.",
    )
    archive_days: int = Field(
        default=10,
        alias="CLIPSTASH_LOG_ARCHIVE_DAYS",
        description="Number of daily log archives to keep.",
        ge=0,
    )

    @field_validator("log_level", mode="before")
    def validate_log_level(cls, v: Any) -> str:
        if isinstance(v, str) and v.upper() in {
            "CRITICAL",
            "ERROR",
            "WARNING",
            "INFO",
            "DEBUG",
        }:
            return v.lower()
        raise ValueError(f"Invalid log level: {v!r}")


# endregion
# region User Config


class UserConfig(BaseModel):
    """
    Contents of the user config file (config.json).

    Attributes:
        db_path (str): Location of the clipboard history database.
        version (str): Version of clipstash that wrote the file.
    """

    db_path: str = Field(..., description="Location of the clipboard history database")
    version: str = Field("1.0.0", description="Version of clipstash that wrote the file")

    @field_validator("db_path")
    def validate_db_path(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("db_path must not be empty")
        return v

    @property
    def path(self) -> Path:
        return Path(self.db_path).expanduser()


def resolve_db_path(
    env: Mapping[str, str],
    file_config: Optional[UserConfig],
    default: Path,
) -> Path:
    """
    Resolve the database location.

    Args:
        env (Mapping[str, str]): Environment variables (usually os.environ).
        file_config (Optional[UserConfig]): Parsed config.json, if present.
        default (Path): Built-in default location.

    Returns:
        Path: CLIPSTASH_DB_PATH if set, else the config file's db_path, else default.

    Example:
        >>> resolve_db_path({}, None, Path("/tmp/x.db"))
        PosixPath('/tmp/x.db')
    """
    override = env.get(DB_PATH_ENV_VAR)
    if override:
        return Path(override).expanduser()
    if file_config is not None:
        return file_config.path
    return Path(default).expanduser()


def expand_db_path(raw: str, home: Optional[Path] = None) -> Path:
    """
    Interpret a user-supplied database path.

    Absolute paths are kept, "~/x" and plain relative paths are taken relative to `home`.

    Example:
        >>> expand_db_path("notes/clip.db", home=Path("/home/me"))
        PosixPath('/home/me/notes/clip.db')
    """
    if not raw or not raw.strip():
        raise ConfigError("Database path must not be empty")
    home = Path(home) if home else Path.home()
    raw = raw.strip()
    if raw == "~":
        raise ConfigError("Database path must name a file, not the home directory")
    if raw.startswith("~/"):
        return home / raw[2:]
    path = Path(raw)
    if path.is_absolute():
        return path
    return home / path


class ConfigManager:
    """
    Reads and writes the user config file.

    Attributes:
        config_dir (Path): Directory holding config.json.
        config_file (Path): Full path of config.json.
    """

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = Path(config_dir) if config_dir else AppEnv.config_dir()
        self.config_file = self.config_dir / "config.json"

    def exists(self) -> bool:
        """Check if the configuration file exists."""
        return self.config_file.exists()

    def is_configured(self, env: Optional[Mapping[str, str]] = None) -> bool:
        """A config file or an explicit database override counts as configured."""
        env = os.environ if env is None else env
        return bool(env.get(DB_PATH_ENV_VAR)) or self.exists()

    def load(self) -> Optional[UserConfig]:
        """Load config.json; None when it does not exist."""
        if not self.config_file.exists():
            return None
        try:
            data = json.loads(self.config_file.read_text(encoding="utf-8"))
            return UserConfig.model_validate(data)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise ConfigError(
                f"Failed to read config file {self.config_file}", original_error=e
            )

    def save(self, config: UserConfig) -> Path:
        """Write config.json, creating the config directory if needed."""
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            self.config_file.write_text(
                config.model_dump_json(indent=2), encoding="utf-8"
            )
        except OSError as e:
            raise ConfigError(
                f"Failed to write config file {self.config_file}", original_error=e
            )
        return self.config_file

    def db_path(self, env: Optional[Mapping[str, str]] = None) -> Path:
        """Resolved database path for this process."""
        env = os.environ if env is None else env
        return resolve_db_path(env, self.load(), AppEnv.default_db_path())


# endregion

__all__ = [
    "DB_PATH_ENV_VAR",
    "BrowserSettings",
    "ConfigManager",
    "LogSettings",
    "MonitorSettings",
    "UserConfig",
    "expand_db_path",
    "get_settings",
    "resolve_db_path",
]
