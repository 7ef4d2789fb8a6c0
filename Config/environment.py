"""
Environment detection and .env file loading.

Uses a single .env file for both desktop and Docker environments.
Every setting falls back to Config.constants_core when unset.
"""
import os
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from . import constants_core
from .exceptions import ConfigAddressError, ConfigRangeError, ConfigTypeError
from .validators import is_address


class Environment:
    """Detect and configure environment."""

    def __init__(self, env_file: Optional[Path] = None):
        self.is_docker = self._detect_docker()
        self.env_name = "prod" if self.is_docker else "dev"
        self.env_file = env_file if env_file is not None else self._find_env_file()
        self._loaded = False

    def _detect_docker(self) -> bool:
        """Detect if running in Docker container."""
        if os.path.exists('/.dockerenv'):
            return True
        if os.getenv('IN_DOCKER', '').lower() == 'true':
            return True
        return False

    def _find_env_file(self) -> Optional[Path]:
        """Find the .env file for current environment."""
        override = os.getenv('ESCROW_ENV_FILE')
        if override:
            env_path = Path(override)
        elif self.is_docker:
            env_path = Path('/app/.env')
        else:
            # Go up from Config/ to project root
            env_path = Path(__file__).parents[1] / '.env'

        return env_path if env_path.exists() else None

    def load(self, force_reload: bool = False) -> None:
        """
        Load environment variables from file.

        Args:
            force_reload: If True, reload even if already loaded
        """
        if self._loaded and not force_reload:
            return

        if not self.env_file:
            self._loaded = True
            return

        load_dotenv(self.env_file, override=False)
        print(f"[INFO] Loaded {self.env_name} environment from {self.env_file}", file=sys.stderr)
        self._loaded = True

    # ========================================================================
    # Settings
    # ========================================================================

    @property
    def log_dir(self) -> Path:
        """Get log directory for current environment."""
        base = os.getenv('ESCROW_LOG_DIR')
        if base:
            return Path(base)
        if self.is_docker:
            return Path('/app/logs')
        return Path.home() / '.gotchi_escrow' / 'logs'

    @property
    def log_level(self) -> str:
        return os.getenv('LOG_LEVEL', 'INFO').upper()

    @property
    def ghst_contract_address(self) -> str:
        return self._address('GHST_CONTRACT_ADDRESS', constants_core.GHST_CONTRACT_ADDRESS)

    @property
    def escrow_contract_address(self) -> str:
        return self._address('ESCROW_CONTRACT_ADDRESS', constants_core.CONTRACT_ADDRESS)

    @property
    def default_token_decimals(self) -> int:
        raw = os.getenv('TOKEN_DECIMALS')
        if raw is None or raw.strip() == '':
            return constants_core.DEFAULT_TOKEN_DECIMALS
        try:
            decimals = int(raw)
        except ValueError:
            raise ConfigTypeError('TOKEN_DECIMALS', raw, int)
        if not 0 <= decimals <= constants_core.MAX_TOKEN_DECIMALS:
            raise ConfigRangeError('TOKEN_DECIMALS', decimals, 0, constants_core.MAX_TOKEN_DECIMALS)
        return decimals

    @property
    def withdraw_recipient(self) -> Optional[str]:
        """Wallet that receives withdrawals when the CLI is not given one."""
        value = os.getenv('WITHDRAW_RECIPIENT')
        if value and not is_address(value):
            raise ConfigAddressError('WITHDRAW_RECIPIENT', value)
        return value or None

    @staticmethod
    def _address(key: str, default: str) -> str:
        value = os.getenv(key) or default
        if not is_address(value):
            raise ConfigAddressError(key, value)
        return value

    def __repr__(self) -> str:
        return f"Environment(env={self.env_name}, docker={self.is_docker}, file={self.env_file})"


# ============================================================================
# Global Instance - Auto-load on import
# ============================================================================

env = Environment()
env.load()

# Export for convenience
is_docker = env.is_docker
env_name = env.env_name
