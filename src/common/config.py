"""
Configuration loading for the SOW document engine.

Defaults live here; a YAML file (argument or SOW_CONFIG_PATH) overrides
them, and environment variables override both. A .env file in the working
directory is loaded on import.
"""

import copy
import logging
import os
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_TAX_RATE = Decimal("0.10")

# Knowledge base chat queries abort after this many seconds.
KNOWLEDGE_BASE_TIMEOUT_SECONDS = 60

# Overall execution budget of a request that consults the knowledge base.
REQUEST_BUDGET_SECONDS = 300

DEFAULT_CONFIG: Dict[str, Any] = {
    "pricing": {
        "tax_rate": "0.10",
        "tax_label": "GST",
        "currency": "AUD",
    },
    "catalog": {
        "path": None,
    },
    "knowledge_base": {
        "url": None,
        "api_key": None,
        "workspace_slug": "sow-generator",
        "timeout_seconds": KNOWLEDGE_BASE_TIMEOUT_SECONDS,
    },
    "export": {
        "converter": "weasyprint",
        "lambda_arn": None,
        "page_size": "A4",
        "margins": {"top": "10mm", "right": "10mm", "bottom": "20mm", "left": "10mm"},
        "print_background": True,
        "display_header_footer": False,
        "max_concurrent": 2,
        "request_budget_seconds": REQUEST_BUDGET_SECONDS,
        "logo_path": None,
    },
    "briefs": {
        "ttl_seconds": 3600,
    },
}

# (section, key, environment variable)
ENV_OVERRIDES = [
    ("knowledge_base", "url", "ANYTHING_LLM_URL"),
    ("knowledge_base", "api_key", "ANYTHING_LLM_API_KEY"),
    ("knowledge_base", "workspace_slug", "ANYTHING_LLM_WORKSPACE_SLUG"),
    ("export", "lambda_arn", "PDF_LAMBDA_ARN"),
    ("export", "converter", "SOW_PDF_CONVERTER"),
    ("export", "logo_path", "SOW_LOGO_PATH"),
    ("catalog", "path", "SOW_RATE_CARD_PATH"),
]

# Settings that must be positive whole numbers: (section, key)
INT_SETTINGS = [
    ("export", "max_concurrent"),
    ("export", "request_budget_seconds"),
    ("knowledge_base", "timeout_seconds"),
    ("briefs", "ttl_seconds"),
]
MAX_INT_SETTING = 10**9


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _int_setting(value: Any, default: int, name: str) -> int:
    """Coerce a config value to a positive int, falling back to ``default``."""
    if isinstance(value, bool):
        number = None
    else:
        try:
            number = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            number = None

    if (
        number is None
        or not number.is_finite()
        or not 0 < number <= MAX_INT_SETTING
        or number != number.to_integral_value()
    ):
        logger.warning(f"Invalid {name} {value!r} in config, using {default}")
        return default
    return int(number)


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load engine configuration.

    Args:
        config_path: Optional YAML file; falls back to SOW_CONFIG_PATH

    Returns:
        Configuration dictionary with every default section present
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    path = config_path or os.getenv("SOW_CONFIG_PATH")
    if path:
        if os.path.exists(path):
            with open(path) as f:
                loaded = yaml.safe_load(f) or {}
            if isinstance(loaded, dict):
                config = _deep_merge(config, loaded)
            else:
                logger.warning(f"Ignoring config file {path}: top level is not a mapping")
        else:
            logger.warning(f"Config file not found: {path}, using defaults")

    for section, defaults in DEFAULT_CONFIG.items():
        if not isinstance(config.get(section), dict):
            logger.warning(f"Ignoring config section {section}: not a mapping")
            config[section] = copy.deepcopy(defaults)

    for section, key, env_var in ENV_OVERRIDES:
        value = os.getenv(env_var)
        if value:
            config[section][key] = value

    for section, key in INT_SETTINGS:
        default = DEFAULT_CONFIG[section][key]
        config[section][key] = _int_setting(config[section].get(key), default, f"{section}.{key}")

    return config


def get_tax_rate(config: Optional[Dict[str, Any]] = None) -> Decimal:
    """Return the configured tax rate, falling back to 10% GST."""
    raw = ((config or {}).get("pricing") or {}).get("tax_rate", DEFAULT_TAX_RATE)
    try:
        rate = Decimal(str(raw))
    except (InvalidOperation, ValueError):
        logger.warning(f"Invalid tax_rate {raw!r} in config, using {DEFAULT_TAX_RATE}")
        return DEFAULT_TAX_RATE
    if not rate.is_finite() or rate < 0:
        logger.warning(f"Invalid tax_rate {raw!r} in config, using {DEFAULT_TAX_RATE}")
        return DEFAULT_TAX_RATE
    return rate
