"""
Configuration management for filefrag.
"""

# filefrag/config.py

import json
import os
import logging

log = logging.getLogger('filefrag')

DEFAULT_CONFIG_PATH = '~/.config/filefrag/config.json'

DEFAULT_CONFIG = {
    "name_prefix": "frag_",
    "digest_algorithm": "md5",
    "file_id_length": 12,
    "block_id_length": 8,
    "save_dir": "fragments",
    "separator": ""  # Written between fragments when joining a directory
}


class Config:
    def __init__(self, config_path: str = None):
        if config_path:
            self.config_path = os.path.expanduser(config_path)
        else:
            self.config_path = os.path.expanduser(DEFAULT_CONFIG_PATH)

        self._data = dict(DEFAULT_CONFIG)

        if os.path.exists(self.config_path):
            with open(self.config_path, 'r') as f:
                user_config = json.load(f)
                self._data.update(user_config)
            log.info(f"Loaded config from {self.config_path}")
        else:
            log.warning(f"No config found at {self.config_path}, using defaults")

    @property
    def name_prefix(self) -> str:
        return self._data['name_prefix']

    @property
    def digest_algorithm(self) -> str:
        return self._data['digest_algorithm']

    @property
    def file_id_length(self) -> int:
        return self._data['file_id_length']

    @property
    def block_id_length(self) -> int:
        return self._data['block_id_length']

    @property
    def save_dir(self) -> str:
        return os.path.expanduser(self._data['save_dir'])

    @property
    def separator(self) -> bytes:
        """Bytes written between fragments on directory reassembly."""
        return self._data['separator'].encode('utf-8')

    def save(self):
        parent = os.path.dirname(self.config_path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(self.config_path, 'w') as f:
            json.dump(self._data, f, indent=2)
        log.info(f"Config saved to {self.config_path}")

    @staticmethod
    def write_default(config_path: str = None) -> str:
        """Write the default config to `config_path` and return the path."""
        config_path = os.path.expanduser(config_path or DEFAULT_CONFIG_PATH)
        parent = os.path.dirname(config_path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(config_path, 'w') as f:
            json.dump(DEFAULT_CONFIG, f, indent=2)
        log.info(f"Config saved to {config_path}")
        return config_path
