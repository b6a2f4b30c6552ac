"""
Secure configuration helpers for Versus
Loads local secret files and keeps API keys out of the logs
"""

import os
import logging
from typing import Optional, Dict, Any, List
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Highest priority first; earlier files win because nothing is overridden
SECRET_FILES = [
    "config/secrets/.env.local",
    os.path.expanduser("~/.versus/.env"),
    ".env",
]

PLACEHOLDER_KEYS = {"your_gemini_key_here", "changeme", "..."}


def load_secret_files(paths: Optional[List[str]] = None) -> List[str]:
    """Load dotenv files into the environment without overriding real env vars"""
    loaded = []
    for path in paths if paths is not None else SECRET_FILES:
        if not os.path.exists(path):
            continue
        try:
            load_dotenv(path, override=False)
            loaded.append(path)
            logger.info(f"✅ Loaded config from: {path}")
        except Exception as e:
            logger.warning(f"⚠️ Failed to load {path}: {e}")

    if not loaded:
        logger.debug("No local secret files found, using process environment only")
    return loaded


def mask_key(key: Optional[str]) -> str:
    """Mask an API key for logging"""
    if not key:
        return "Not set"
    if len(key) <= 12:
        return "***"
    return key[:8] + "..." + key[-4:]


def check_api_key(key: Optional[str]) -> bool:
    """Warn about obviously wrong keys; returns True when a usable key is present"""
    if not key:
        logger.warning("⚠️ GEMINI_API_KEY is not set; /api/compare will answer 500")
        return False
    if key in PLACEHOLDER_KEYS:
        logger.warning("⚠️ GEMINI_API_KEY appears to be a placeholder. Please set your real API key.")
        return False
    if len(key) < 10:
        logger.warning("⚠️ GEMINI_API_KEY seems too short. Please verify it's correct.")
    else:
        logger.info(f"✅ Gemini API key loaded: {mask_key(key)}")
    return True


def get_config_summary(settings) -> Dict[str, Any]:
    """Configuration summary that is safe to log"""
    return {
        "server": {
            "host": settings.server_host,
            "port": settings.server_port,
            "log_level": settings.log_level,
        },
        "model": {
            "name": settings.gemini_model,
            "temperature": settings.temperature,
            "max_output_tokens": settings.max_output_tokens,
        },
        "api_keys": {
            "gemini": mask_key(settings.gemini_api_key),
        },
        "comparison": {
            "randomize_order": settings.randomize_order,
            "tie_threshold": settings.tie_threshold,
        },
    }
