# region Docstring
"""
clipstash.config.base

Environment detection and filesystem locations.

Overview:
- Provides a utility class for detecting the current application environment
    (production or development) and for resolving the per-user directories that
    clipstash reads from and writes to.
- Every location is computed on call, so XDG_* and CLIPSTASH_ENV changes take effect
    without re-importing.

Contents:
- Classes:
    - AppEnv:
        Class methods to determine the environment, the config directory
        (XDG aware), the data directory and the default database path.

Environment Detection Logic:
- CLIPSTASH_ENV set to "prod" or "dev" wins.
- Everything else is production.
"""
# endregion
# region Imports
from clipstash.imports import os, Path, Literal

# endregion
# region AppEnv Class


class AppEnv:
    """
    Application environment detection utility.

    Attributes:
        APP_NAME (str): Directory name used under the XDG base directories.
        PROD (Literal["prod"]): Constant representing the production environment.
        DEV (Literal["dev"]): Constant representing the development environment.
    """

    APP_NAME: str = "clipstash"
    PROD: Literal["prod"] = "prod"
    DEV: Literal["dev"] = "dev"

    @classmethod
    def environment(cls) -> Literal["prod", "dev"]:
        """Determine the current application environment."""
        if os.getenv("CLIPSTASH_ENV") in {cls.PROD, cls.DEV}:
            return os.getenv("CLIPSTASH_ENV")
        return cls.PROD

    @classmethod
    def config_dir(cls) -> Path:
        """Get the configuration directory, honouring XDG_CONFIG_HOME."""
        xdg = os.getenv("XDG_CONFIG_HOME")
        if xdg:
            return Path(xdg).expanduser() / cls.APP_NAME
        return Path.home() / ".config" / cls.APP_NAME

    @classmethod
    def data_dir(cls) -> Path:
        """Get the data directory, honouring XDG_DATA_HOME."""
        xdg = os.getenv("XDG_DATA_HOME")
        if xdg:
            return Path(xdg).expanduser() / cls.APP_NAME
        return Path.home() / ".local" / "share" / cls.APP_NAME

    @classmethod
    def default_db_path(cls) -> Path:
        """Get the built-in database location."""
        return cls.data_dir() / "clipboard.db"


# endregion

__all__ = ["AppEnv"]
