"""Runtime configuration: .env, optional config.yaml, environment overrides"""

import os
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv
from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from .sanitize import sanitize_credentials


DEFAULT_CONFIG_PATH = 'config/config.yaml'
DEFAULT_PORTAL_URL = 'https://utdnr.fieldops.tylerapp.com'


class ConfigurationError(Exception):
    """Raised when required settings are missing or invalid"""


class PortalSettings(BaseModel):
    """Where and as whom to log in"""
    url: str = DEFAULT_PORTAL_URL
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class TimingSettings(BaseModel):
    """Waits and pauses, all in milliseconds"""
    max_retries: int = Field(default=3, ge=1)
    element_timeout: int = Field(default=10000, gt=0)
    retry_delay: int = Field(default=1000, ge=0)
    page_ready_timeout: int = Field(default=30000, gt=0)
    search_field_timeout: int = Field(default=15000, gt=0)
    search_results_timeout: int = Field(default=10000, gt=0)
    search_results_fallback: int = Field(default=2000, ge=0)
    review_form_timeout: int = Field(default=15000, gt=0)
    approve_settle_timeout: int = Field(default=10000, gt=0)
    after_review_pause: int = Field(default=2000, ge=0)
    between_records_pause: int = Field(default=1000, ge=0)
    observation_delay: int = Field(default=6000, ge=0)
    slow_mo: int = Field(default=500, ge=0)


class AutomationSettings(BaseModel):
    """Everything a review run needs"""
    portal: PortalSettings
    timing: TimingSettings = Field(default_factory=TimingSettings)
    csv_path: str = 'videos.csv'
    headless: bool = False
    report_path: Optional[str] = None

    def log_summary(self):
        """Log the effective settings with credentials masked"""
        logger.info(f"Settings: {sanitize_credentials(self.model_dump())}")


def _env_flag(value: str) -> bool:
    return value.lower() in ('true', '1', 'yes')


def _load_yaml_config(config_path: str) -> Dict[str, Any]:
    """Load config.yaml if present; an absent file means defaults"""
    if not os.path.exists(config_path):
        logger.debug(f"No config file at {config_path}, using defaults")
        return {}

    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Could not read {config_path}: {e}") from e

    if not isinstance(config, dict):
        raise ConfigurationError(f"{config_path} must contain a mapping at the top level")
    return config


def load_settings(
    config_path: str = DEFAULT_CONFIG_PATH,
    overrides: Optional[Dict[str, Any]] = None,
) -> AutomationSettings:
    """
    Build settings from config.yaml, then environment, then explicit overrides

    Args:
        config_path: Path to optional YAML config with portal/timing sections
        overrides: Top-level values (e.g. from CLI flags) applied last

    Returns:
        Validated AutomationSettings

    Raises:
        ConfigurationError: credentials missing or a value fails validation
    """
    load_dotenv()
    config = _load_yaml_config(config_path)

    portal = dict(config.get('portal') or {})
    timing = dict(config.get('timing') or {})
    values: Dict[str, Any] = {
        key: config[key] for key in ('csv_path', 'headless', 'report_path') if key in config
    }

    env_portal = {
        'url': os.getenv('PORTAL_URL'),
        'username': os.getenv('PORTAL_USERNAME'),
        'password': os.getenv('PORTAL_PASSWORD'),
    }
    portal.update({k: v for k, v in env_portal.items() if v})

    if os.getenv('SLOW_MO_MS'):
        timing['slow_mo'] = os.getenv('SLOW_MO_MS')
    if os.getenv('VIDEOS_CSV'):
        values['csv_path'] = os.getenv('VIDEOS_CSV')
    if os.getenv('HEADLESS'):
        values['headless'] = _env_flag(os.getenv('HEADLESS'))
    if os.getenv('REPORT_PATH'):
        values['report_path'] = os.getenv('REPORT_PATH')

    values.update({k: v for k, v in (overrides or {}).items() if v is not None})

    missing = [f"PORTAL_{key.upper()}" for key in ('username', 'password') if not portal.get(key)]
    if missing:
        raise ConfigurationError(f"Missing portal credentials: {missing}")

    try:
        return AutomationSettings(portal=portal, timing=timing, **values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e
