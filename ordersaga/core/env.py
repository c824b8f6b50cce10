"""
Environment variable management with .env file support.

Loads .env files through python-dotenv, reads typed values and substitutes
${VAR} references in configuration dictionaries loaded from YAML.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

from dotenv import load_dotenv


class EnvManager:
    """
    Manages environment variables for ordersaga.

    Example:
        >>> env = EnvManager()
        >>> env.load()  # Loads .env if exists
        >>> level = env.get("ORDERSAGA_LOG_LEVEL", "INFO")
    """

    def __init__(self, project_root: Path | str | None = None, auto_load: bool = False):
        """
        Initialize the environment manager.

        Args:
            project_root: Directory searched for .env (default: cwd)
            auto_load: Load the .env file immediately
        """
        self.project_root = Path(project_root) if project_root else Path.cwd()
        self._loaded = False

        if auto_load:
            self.load()

    @property
    def loaded(self) -> bool:
        return self._loaded

    def load(self, env_file: str | Path | None = None, override: bool = False) -> bool:
        """
        Load environment variables from a .env file.

        Args:
            env_file: Path to .env file (defaults to .env in project root)
            override: Whether to override existing environment variables

        Returns:
            True if the file was loaded, False if it does not exist
        """
        env_path = Path(env_file) if env_file is not None else self.project_root / ".env"

        if not env_path.exists():
            return False

        load_dotenv(env_path, override=override)
        self._loaded = True
        return True

    def get(self, key: str, default: str | None = None, required: bool = False) -> str | None:
        """
        Get an environment variable value.

        Raises:
            ValueError: If required=True and the variable is not set
        """
        value = os.environ.get(key, default)

        if required and value is None:
            msg = f"Required environment variable not set: {key}"
            raise ValueError(msg)

        return value

    def get_bool(self, key: str, default: bool = False) -> bool:
        """Get environment variable as boolean."""
        value = (self.get(key) or "").lower()
        if value in ("true", "1", "yes", "on"):
            return True
        if value in ("false", "0", "no", "off"):
            return False
        return default

    def get_int(self, key: str, default: int = 0) -> int:
        """Get environment variable as integer."""
        try:
            return int(self.get(key, str(default)))
        except (ValueError, TypeError):
            return default

    def substitute(self, text: str) -> str:
        """
        Substitute environment variables in text.

        Supports:
        - ${VAR} - variable substitution (left as is when unset)
        - ${VAR:-default} - with default value
        - ${VAR:?error} - required variable (raises ValueError if not set)

        Example:
            >>> os.environ["ORDERSAGA_PREFIX"] = "ord-"
            >>> env.substitute("${ORDERSAGA_PREFIX}")
            'ord-'
        """
        pattern = r"\$\{([^}:]+)(?::([?-])([^}]*))?\}"

        def replace(match: re.Match) -> str:
            var_name, operator, operand = match.group(1), match.group(2), match.group(3)
            value = os.environ.get(var_name)

            if operator == "-":
                return value if value is not None else operand
            if operator == "?":
                if value is None:
                    raise ValueError(operand or f"Required variable not set: {var_name}")
                return value
            return value if value is not None else match.group(0)

        return re.sub(pattern, replace, text)

    def substitute_dict(self, data: dict[str, Any]) -> dict[str, Any]:
        """Recursively substitute environment variables in dictionary values."""
        return {key: self._substitute_value(value) for key, value in data.items()}

    def _substitute_value(self, value: Any) -> Any:
        if isinstance(value, str):
            return self.substitute(value)
        if isinstance(value, dict):
            return self.substitute_dict(value)
        if isinstance(value, list):
            return [self._substitute_value(item) for item in value]
        return value


_env_manager: EnvManager | None = None


def get_env() -> EnvManager:
    """Get the process-wide EnvManager."""
    global _env_manager
    if _env_manager is None:
        _env_manager = EnvManager()
    return _env_manager
