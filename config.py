"""
Configuration for the peer review system.

Precedence: environment (including .env) > peer_review.yaml > defaults.
"""

import os
import yaml
from pathlib import Path
from typing import Optional
from dataclasses import dataclass, field, fields
from dotenv import load_dotenv


# Load environment variables
load_dotenv()

# Paths
SETTINGS_FILE = Path(os.environ.get("PEER_REVIEW_SETTINGS", "peer_review.yaml"))
DATA_DIR = Path(os.environ.get("PEER_REVIEW_DATA_DIR", "data"))

BACKENDS = ("json", "memory")


@dataclass
class DefaultAdmin:
    """Account created on first start when no admin exists."""
    name: str = "Admin"
    email: str = "admin@scis.edu"
    password: str = field(default="admin123", repr=False)
    admin_level: str = "System Admin"


@dataclass
class Settings:
    """Runtime settings."""
    data_dir: Path = DATA_DIR
    backend: str = "json"
    default_admin: DefaultAdmin = field(default_factory=DefaultAdmin)
    date_format: str = "%Y-%m-%d %H:%M"

    def __post_init__(self):
        self.data_dir = Path(self.data_dir)
        if self.backend not in BACKENDS:
            raise ValueError(f"Unknown backend '{self.backend}' (expected one of: {', '.join(BACKENDS)})")


# Environment overrides: env var -> (section, key)
ENV_OVERRIDES = {
    "PEER_REVIEW_DATA_DIR": (None, "data_dir"),
    "PEER_REVIEW_BACKEND": (None, "backend"),
    "PEER_REVIEW_ADMIN_NAME": ("default_admin", "name"),
    "PEER_REVIEW_ADMIN_EMAIL": ("default_admin", "email"),
    "PEER_REVIEW_ADMIN_PASSWORD": ("default_admin", "password"),
    "PEER_REVIEW_ADMIN_LEVEL": ("default_admin", "admin_level"),
}


def load_settings_file(path: Path = SETTINGS_FILE) -> dict:
    """Load raw settings from YAML. Missing file means no overrides."""
    if path and Path(path).exists():
        with open(path) as f:
            return yaml.safe_load(f) or {}
    return {}


def load_settings(path: Optional[Path] = SETTINGS_FILE) -> Settings:
    """Build Settings from defaults, the YAML file and the environment."""
    raw = load_settings_file(path) if path else {}

    admin_raw = dict(raw.get("default_admin") or {})
    top_raw = {k: v for k, v in raw.items() if k != "default_admin"}

    for env_key, (section, key) in ENV_OVERRIDES.items():
        value = os.environ.get(env_key)
        if not value:
            continue
        if section == "default_admin":
            admin_raw[key] = value
        else:
            top_raw[key] = value

    admin_keys = {f.name for f in fields(DefaultAdmin)}
    settings_keys = {f.name for f in fields(Settings)} - {"default_admin"}

    unknown = (set(admin_raw) - admin_keys) | (set(top_raw) - settings_keys)
    if unknown:
        print(f"[Config] Ignoring unknown settings: {', '.join(sorted(unknown))}")

    return Settings(
        default_admin=DefaultAdmin(**{k: v for k, v in admin_raw.items() if k in admin_keys}),
        **{k: v for k, v in top_raw.items() if k in settings_keys},
    )
