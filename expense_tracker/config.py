"""
Environment configuration module
Loads all environment variables used by the ingestion and query paths.
"""

import os
from dotenv import load_dotenv

# Load .env file (for local development)
load_dotenv()

# LLM configuration (vendor classifier + intent classifier)
OPENAI_API_KEY = os.getenv('OPENAI_API_KEY', '')
GPT_MODEL = os.getenv('GPT_MODEL', 'gpt-4o-mini')

# Redis configuration (optional; in-memory store is used when unset)
REDIS_URL = os.getenv('REDIS_URL', '')
KV_ENABLED = bool(REDIS_URL)
KV_KEY_PREFIX = os.getenv('KV_KEY_PREFIX', 'expense_tracker')

# Bank notification timestamps carry no zone; they are read in this one
BANK_TIMEZONE = os.getenv('BANK_TIMEZONE', 'UTC')

# Aggregation defaults
DEFAULT_PERIOD = os.getenv('DEFAULT_PERIOD', 'THIS_MONTH')
TOP_MERCHANTS_LIMIT = int(os.getenv('TOP_MERCHANTS_LIMIT', '10'))
MONTHLY_TREND_MONTHS = int(os.getenv('MONTHLY_TREND_MONTHS', '12'))

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')


def missing_llm_config() -> list[str]:
    """Names of the variables an LLM-backed command needs but does not have."""
    required_vars = {
        'OPENAI_API_KEY': OPENAI_API_KEY,
    }
    return [var_name for var_name, var_value in required_vars.items() if not var_value]
