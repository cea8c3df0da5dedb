import configparser
import os
from typing import Optional, Tuple

from manga_archiver.core.models import DEFAULT_DELAY_MS, DEFAULT_MAX_RETRIES, DEFAULT_TIMEOUT_SECONDS
from manga_archiver.utils.logger import get_logger

# Determine the absolute path to the directory where this script is located
SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
# Goes up two levels from core/ to the project root
PROJECT_ROOT = os.path.dirname(os.path.dirname(SCRIPT_DIR))
DEFAULT_CONFIG_PATH = os.path.join(PROJECT_ROOT, 'workspace', 'config', 'settings.ini')
DEFAULT_OUTPUT_DIR = '.'
CONFIG_PATH_ENV_VAR = 'MANGA_ARCHIVER_CONFIG'

logger = get_logger(__name__)


def default_settings() -> dict:
    return {
        'General': {'output_dir': DEFAULT_OUTPUT_DIR},
        'Network': {
            'delay_ms': str(DEFAULT_DELAY_MS),
            'max_retries': str(DEFAULT_MAX_RETRIES),
            'timeout': str(DEFAULT_TIMEOUT_SECONDS),
        },
        'Filter': {'language': '', 'preferred_groups': ''},
    }


class ConfigManager:
    def __init__(self, config_file_path=None):
        self.config_file_path = config_file_path or os.getenv(CONFIG_PATH_ENV_VAR) or DEFAULT_CONFIG_PATH
        self.config = configparser.ConfigParser()
        self._load_config()

    def _load_config(self):
        """Loads the configuration from the INI file."""
        if not os.path.exists(self.config_file_path):
            logger.warning(f"Config file not found at {self.config_file_path}. Attempting to create a default config or using hardcoded defaults.")
            default_config = configparser.ConfigParser()
            default_config.read_dict(default_settings())
            try:
                os.makedirs(os.path.dirname(self.config_file_path) or '.', exist_ok=True)
                with open(self.config_file_path, 'w') as configfile:
                    default_config.write(configfile)
                logger.info(f"Created a default config file at: {self.config_file_path}")
            except OSError as e:
                logger.error(f"Error creating default config file: {e}. Using hardcoded defaults.", exc_info=True)
            self.config = default_config
            return

        self.config.read(self.config_file_path)

        # Fill in sections missing from an older or hand-written config file.
        for section, options in default_settings().items():
            if not self.config.has_section(section):
                self.config.add_section(section)
                logger.info(f"Added missing [{section}] section to the config.")
            for option, value in options.items():
                if not self.config.has_option(section, option):
                    self.config.set(section, option, value)

    def get_setting(self, section: str, option: str, fallback=None) -> Optional[str]:
        """Gets a specific setting from the configuration."""
        try:
            return self.config.get(section, option, fallback=fallback)
        except (configparser.NoSectionError, configparser.NoOptionError):
            return fallback

    def get_output_dir(self) -> str:
        path = self.get_setting('General', 'output_dir', fallback=DEFAULT_OUTPUT_DIR)
        if not path or not path.strip():
            logger.warning("Output directory is empty in config, using the current directory.")
            return DEFAULT_OUTPUT_DIR
        return path.strip()

    def get_delay_ms(self) -> int:
        return self._get_number('Network', 'delay_ms', int, DEFAULT_DELAY_MS)

    def get_max_retries(self) -> int:
        return self._get_number('Network', 'max_retries', int, DEFAULT_MAX_RETRIES)

    def get_timeout(self) -> float:
        return self._get_number('Network', 'timeout', float, DEFAULT_TIMEOUT_SECONDS)

    def get_language(self) -> str:
        return (self.get_setting('Filter', 'language', fallback='') or '').strip()

    def get_preferred_groups(self) -> Tuple[str, ...]:
        """Returns the comma-separated preferred groups, most preferred first."""
        raw = self.get_setting('Filter', 'preferred_groups', fallback='') or ''
        return tuple(group.strip() for group in raw.split(',') if group.strip())

    def _get_number(self, section: str, option: str, cast, default):
        raw = self.get_setting(section, option)
        if raw is None or not raw.strip():
            return default
        try:
            return cast(raw.strip())
        except ValueError:
            logger.warning(f"Invalid value '{raw}' for [{section}] {option} in {self.config_file_path}. Using default {default}.")
            return default
