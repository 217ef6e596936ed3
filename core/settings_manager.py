import base64
import copy
import json
import os
from typing import Dict, Optional

import keyring

from core.logger import USER_DATA_DIR, get_logger

logger = get_logger(__name__)

APP_NAME = "xlf_auto_translate"
CONFIG_DIR = USER_DATA_DIR
CONFIG_FILE = os.environ.get("XLF_AUTO_TRANSLATE_CONFIG", os.path.join(CONFIG_DIR, "config.json"))
FALLBACK_KEY_FILE = os.path.join(os.path.dirname(CONFIG_FILE), "secrets.json")

DEFAULT_CONFIG = {
    "default_provider": "google",
    "request_timeout": 20,
    "providers": {
        "google": {
            "endpoint": "https://translate.googleapis.com/translate_a/single",
        },
        "llm": {
            "base_url": "https://api.openai.com/v1",
            "model": "gpt-4o-mini",
        },
    },
}


class KeyringManager:
    """
    Manages secure storage of API Keys using system keyring.
    Falls back to a local obfuscated file if keyring is unavailable.
    """

    def __init__(self, fallback_path: str = FALLBACK_KEY_FILE):
        self.fallback_path = fallback_path
        self.use_fallback = False
        try:
            # Headless environments often have no usable backend
            keyring.get_password("test_service", "test_user")
        except Exception as e:
            logger.warning(f"System keyring not available: {e}. Using local fallback.")
            self.use_fallback = True

    def set_secret(self, service: str, key: str, value: str):
        if not value:
            return

        if self.use_fallback:
            self._save_fallback(service, key, value)
        else:
            try:
                keyring.set_password(f"{APP_NAME}_{service}", key, value)
            except Exception as e:
                logger.error(f"Failed to save to keyring: {e}. Switching to fallback.")
                self.use_fallback = True
                self._save_fallback(service, key, value)

    def get_secret(self, service: str, key: str) -> Optional[str]:
        if self.use_fallback:
            return self._load_fallback(service, key)
        try:
            return keyring.get_password(f"{APP_NAME}_{service}", key)
        except Exception as e:
            logger.warning(f"Keyring read failed ({e}), trying fallback file")
            return self._load_fallback(service, key)

    def _save_fallback(self, service: str, key: str, value: str):
        """Base64 only: keeps keys out of plain sight, it is not encryption."""
        data = self._read_fallback_file()
        data.setdefault(service, {})[key] = base64.b64encode(value.encode("utf-8")).decode("utf-8")

        os.makedirs(os.path.dirname(self.fallback_path) or ".", exist_ok=True)
        with open(self.fallback_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    def _load_fallback(self, service: str, key: str) -> Optional[str]:
        encoded = self._read_fallback_file().get(service, {}).get(key)
        if not encoded:
            return None
        try:
            return base64.b64decode(encoded).decode("utf-8")
        except ValueError:
            logger.warning(f"Corrupt fallback secret for {service}/{key}")
            return None

    def _read_fallback_file(self) -> Dict:
        if not os.path.exists(self.fallback_path):
            return {}
        try:
            with open(self.fallback_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read fallback secrets: {e}")
            return {}


class SettingsManager:
    """
    Persistent defaults for the CLI and server (provider choice, endpoints).
    Separates sensitive data (keyring) from config (JSON).
    """

    def __init__(self, config_path: str = CONFIG_FILE):
        self.config_path = config_path
        self._keyring = None
        self.config = self._load_config()

    @property
    def keyring(self) -> KeyringManager:
        # Only probe the system keyring when a secret is actually needed
        if self._keyring is None:
            self._keyring = KeyringManager(
                os.path.join(os.path.dirname(self.config_path) or ".", "secrets.json"))
        return self._keyring

    def _load_config(self) -> Dict:
        config = copy.deepcopy(DEFAULT_CONFIG)
        if os.path.exists(self.config_path):
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    stored = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.error(f"Failed to load config {self.config_path}: {e}")
                return config
            providers = stored.pop("providers", {})
            config.update(stored)
            for name, values in providers.items():
                config["providers"].setdefault(name, {}).update(values)
        return config

    def save_config(self):
        os.makedirs(os.path.dirname(self.config_path) or ".", exist_ok=True)
        with open(self.config_path, "w", encoding="utf-8") as f:
            json.dump(self.config, f, indent=2)

    def get_api_key(self, provider_name: str) -> Optional[str]:
        """`<PROVIDER>_API_KEY` in the environment wins over the stored secret."""
        env_key = os.environ.get(f"{provider_name.upper()}_API_KEY")
        if env_key:
            return env_key
        return self.keyring.get_secret("providers", provider_name)

    def set_api_key(self, provider_name: str, key: str):
        self.keyring.set_secret("providers", provider_name, key)

    def get_provider_config(self, provider_name: str) -> Dict:
        return self.config.get("providers", {}).get(provider_name, {})

    def get_active_provider(self) -> str:
        return self.config.get("default_provider", "google")

    def set_active_provider(self, provider_name: str):
        self.config["default_provider"] = provider_name
        self.save_config()

    @property
    def request_timeout(self) -> float:
        return float(self.config.get("request_timeout", 20))
