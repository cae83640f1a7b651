"""Configuration loader for pgprovisioner."""

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import dotenv_values

from pgprovisioner.constants import ENV_BILLING_DB, ENV_MAIN_DB, ENV_PASSWORD, ENV_USER
from pgprovisioner.errors import ConfigurationError


class ConfigLoader:
    """Loads YAML configuration files and ``.env`` credentials for CLI defaults."""

    SUPPORTED_KEYS = {
        "user",
        "password",
        "main_db",
        "billing_db",
        "verbose",
        "log_file",
        "env_file",
        "command_timeout",
        "package_name",
    }

    TEXT_KEYS = ("user", "password", "main_db", "billing_db", "log_file", "env_file", "package_name")
    FLAG_KEYS = ("verbose",)

    ENV_KEYS = {
        "user": ENV_USER,
        "password": ENV_PASSWORD,
        "main_db": ENV_MAIN_DB,
        "billing_db": ENV_BILLING_DB,
    }

    def load(self, config_path: Optional[str]) -> Dict[str, Any]:
        if not config_path:
            return {}

        path = Path(config_path)
        if not path.exists():
            raise ConfigurationError(message=f"Config file not found: {config_path}")

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as exc:
            raise ConfigurationError(message=f"Invalid config file '{config_path}': {exc}") from exc

        if parsed is None:
            return {}
        if not isinstance(parsed, dict):
            raise ConfigurationError(message="Config file must contain a YAML mapping at the root.")

        unknown = sorted(set(parsed.keys()) - self.SUPPORTED_KEYS)
        if unknown:
            unknown_list = ", ".join(unknown)
            raise ConfigurationError(message=f"Unknown configuration keys: {unknown_list}")

        self._check_types(parsed)
        return parsed

    def _check_types(self, parsed: Dict[str, Any]):
        for key in self.TEXT_KEYS:
            value = parsed.get(key)
            # YAML reads unquoted yes/no/on/off as booleans
            if value is not None and (isinstance(value, bool) or not isinstance(value, (str, int, float))):
                raise ConfigurationError(
                    [key],
                    message=f"Configuration key '{key}' must be a string. Quote the value in the config file.",
                )

        for key in self.FLAG_KEYS:
            value = parsed.get(key)
            if value is not None and not isinstance(value, bool):
                raise ConfigurationError([key], message=f"Configuration key '{key}' must be true or false.")

        timeout = parsed.get("command_timeout")
        if timeout is not None:
            if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
                raise ConfigurationError(
                    ["command_timeout"],
                    message="Configuration key 'command_timeout' must be a positive number of seconds.",
                )

    def load_env(
        self,
        env_file: Optional[str],
        environ: Optional[Mapping[str, str]] = None,
    ) -> Dict[str, str]:
        """Collect credentials from the process environment and an optional ``.env`` file.

        Process environment variables win over ``.env`` entries, matching
        ``load_dotenv(override=False)``.
        """
        environ = os.environ if environ is None else environ
        file_values: Dict[str, Optional[str]] = {}
        if env_file and Path(env_file).is_file():
            file_values = dict(dotenv_values(env_file, interpolate=False))

        values: Dict[str, str] = {}
        for key, env_name in self.ENV_KEYS.items():
            value = environ.get(env_name)
            if value is None:
                value = file_values.get(env_name)
            if value is not None:
                values[key] = value
        return values
