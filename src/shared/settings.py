"""Environment and file-based settings.

Secrets (credentials, SAS keys) come only from environment variables, loaded
from .env by python-dotenv. Non-secret defaults live in
config/environments.yaml.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import yaml
from dotenv import load_dotenv

from src.shared.errors import MissingConfigError

__all__ = [
    'ADMIN',
    'Credentials',
    'ENVIRONMENTS_FILE',
    'NORMAL_USER',
    'get_base_url',
    'get_credentials',
    'load_environment',
    'load_environments_config',
    'missing_env',
    'require_env',
]

logger = logging.getLogger(__name__)

ENVIRONMENTS_FILE = Path(__file__).resolve().parents[2] / "config" / "environments.yaml"

# Credential variable pairs per role
ADMIN = ('ADMIN_MS_USERNAME', 'ADMIN_MS_PASSWORD')
NORMAL_USER = ('NORMAL_MS_USERNAME', 'NORMAL_MS_PASSWORD')


@dataclass(frozen=True)
class Credentials:
    """Username/password pair for the Microsoft sign-in flow."""

    username: str
    password: str

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password='***')"


def load_environment() -> None:
    """Load .env, then the file named by ENV_FILE (overriding) when set."""
    load_dotenv()
    env_file = os.getenv('ENV_FILE')
    if env_file:
        if Path(env_file).exists():
            load_dotenv(env_file, override=True)
            logger.info(f"Loaded environment overrides from {env_file}")
        else:
            logger.warning(f"ENV_FILE points to a missing file: {env_file}")


def missing_env(names: Iterable[str]) -> List[str]:
    """Return the subset of names that are unset or blank."""
    return [name for name in names if not os.getenv(name, '').strip()]


def require_env(*names: str, context: str = "configuration") -> Dict[str, str]:
    """Read required environment variables.

    Raises:
        MissingConfigError: Naming every variable that is unset or blank
    """
    missing = missing_env(names)
    if missing:
        raise MissingConfigError(missing, context)
    return {name: os.environ[name].strip() for name in names}


def get_credentials(role=ADMIN) -> Credentials:
    """Credentials for a role, e.g. get_credentials(NORMAL_USER)."""
    username_var, password_var = role
    values = require_env(username_var, password_var, context="login credentials")
    return Credentials(values[username_var], values[password_var])


def load_environments_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load config/environments.yaml."""
    config_path = Path(path) if path else ENVIRONMENTS_FILE
    with open(config_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def get_base_url(config: Optional[Dict[str, Any]] = None, environment: Optional[str] = None) -> str:
    """Base URL of the application under test.

    BASE_URL wins over the per-environment value in environments.yaml.
    """
    override = os.getenv('BASE_URL', '').strip()
    if override:
        return override

    config = config if config is not None else load_environments_config()
    environment = (environment or os.getenv('ENVIRONMENT') or config.get('default_environment', 'uat')).lower()
    environments = config.get('environments', {})
    if environment not in environments:
        raise ValueError(f"Unknown environment '{environment}'. Expected one of: {', '.join(environments)}")
    return environments[environment]['base_url']
