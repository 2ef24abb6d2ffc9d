"""JSON persistence for the dotlocal configuration."""

import json
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from ..common.exceptions import ConfigLoadError, ConfigWriteError
from ..common.logging import get_logger
from .models import DotLocalConfig

logger = get_logger(__name__)


def write_atomically(path: Path, content: str) -> None:
    """Replace ``path`` with ``content`` via a temporary file in the same directory."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(temp_path, path)
    except Exception:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise


class ConfigStore:
    """Loads and saves :class:`DotLocalConfig` as a single JSON document.

    The file is the only state shared between CLI invocations and the daemon.
    There is no locking: the last writer wins.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> DotLocalConfig:
        """Load the configuration from disk.

        Returns:
            The stored configuration, or defaults when the file is absent or empty

        Raises:
            ConfigLoadError: If the file cannot be read or is not a valid document
        """
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("No config file, using defaults", path=str(self.path))
            return DotLocalConfig()
        except OSError as e:
            raise ConfigLoadError(f"Cannot read config file {self.path}: {e}") from e

        if not text.strip():
            return DotLocalConfig()

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigLoadError(f"Invalid JSON in {self.path}: {e}") from e

        try:
            return DotLocalConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigLoadError(f"Invalid config structure in {self.path}: {e}") from e

    def save(self, config: DotLocalConfig) -> None:
        """Persist the whole configuration, replacing the file.

        Raises:
            ConfigWriteError: If the file cannot be written
        """
        try:
            write_atomically(self.path, config.to_json())
        except OSError as e:
            raise ConfigWriteError(f"Cannot write config file {self.path}: {e}") from e
        logger.debug(
            "Config saved", path=str(self.path), records=len(config.records)
        )
