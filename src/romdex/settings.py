import os
import tomllib
from pathlib import Path

SETTINGS_FILE_NAME = 'romdex.toml'
SETTINGS_ENVIRONMENT_VARIABLE = 'ROMDEX_CONFIG'

# Settings key constants
SETTING_SCAN_EXTENSIONS = 'scan.extensions'
SETTING_SCAN_RECURSIVE = 'scan.recursive'
SETTING_SCAN_SKIP_UNREADABLE = 'scan.skip_unreadable'
SETTING_SCAN_RETRIES = 'scan.retries'
SETTING_SCAN_EXCLUDED = 'scan.excluded'
SETTING_DATABASE_PATH = 'database.path'
SETTING_LOGGING_PATH = 'logging.path'
SETTING_LOGGING_LEVEL = 'logging.level'
SETTING_MESSAGES_DURATION = 'messages.duration'


class Settings:
    """Read-only view of romdex.toml.

    The file is located, in order, from the explicit path, the ROMDEX_CONFIG
    environment variable, or romdex.toml in the working directory. A missing
    file yields empty settings, so every get() returns its default. An
    explicitly named file that does not exist is an error.

    Example:
        settings = Settings.load()
        extensions = settings.get(SETTING_SCAN_EXTENSIONS)
        recursive = settings.get(SETTING_SCAN_RECURSIVE, False)
    """

    def __init__(self, data: dict | None = None, path: Path | None = None):
        self._settings = data or {}
        self._path = path

    @classmethod
    def load(cls, path: str | os.PathLike | None = None) -> 'Settings':
        """Load settings from a TOML file.

        Args:
            path: Settings file. When None, ROMDEX_CONFIG is used, then romdex.toml in the
                current directory; a missing romdex.toml gives empty settings.

        Raises:
            FileNotFoundError: path (or ROMDEX_CONFIG) names a missing file
            tomllib.TOMLDecodeError: the file is not valid TOML
        """
        explicit = True
        if path is None:
            path = os.environ.get(SETTINGS_ENVIRONMENT_VARIABLE)
        if path is None:
            path = Path.cwd() / SETTINGS_FILE_NAME
            explicit = False

        path = Path(path)
        if not path.exists():
            if explicit:
                raise FileNotFoundError(f"Settings file {path} does not exist")
            return cls()

        with open(path, 'rb') as f:
            return cls(tomllib.load(f), path)

    @property
    def path(self) -> Path | None:
        return self._path

    def get(self, key: str, default=None):
        """Get a setting by dotted key, e.g. 'scan.extensions'.

        Returns default when any component is missing or an intermediate value
        is not a table.
        """
        value = self._settings

        for k in key.split('.'):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value
