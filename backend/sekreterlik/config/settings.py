"""Process-wide settings, read once at import time.

Values come from the environment (a local ``.env`` is loaded first). Changing
the environment afterwards has no effect until the process restarts.
"""
from __future__ import annotations
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()


def env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return str(raw).strip().lower() == 'true'


# Remote identity provider backed auth instead of local-session-only auth
USE_REMOTE_IDENTITY = env_flag('SEKRETERLIK_USE_REMOTE_IDENTITY')

# Views without a policy entry stay reachable unless this is switched off
VIEW_GATE_FAIL_OPEN = env_flag('SEKRETERLIK_VIEW_GATE_FAIL_OPEN', True)

# Opt-in: reject permission keys outside PermissionKey on write; keys are opaque strings otherwise
STRICT_PERMISSION_KEYS = env_flag('SEKRETERLIK_STRICT_PERMISSION_KEYS')

VIEW_ERROR_TTL_SECONDS = 3

API_BASE_URL = os.getenv('SEKRETERLIK_API_BASE_URL', 'http://localhost:5000')

SESSION_FILE = Path(os.getenv('SEKRETERLIK_SESSION_FILE', str(Path.home() / '.sekreterlik' / 'session.json')))
