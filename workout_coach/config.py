"""
Configuration loading: config.yaml for settings, .env or Streamlit secrets for the API key.
"""

import os
import yaml
from dotenv import load_dotenv
from workout_coach.errors import ConfigError


PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEFAULT_CONFIG_PATH = os.path.join(PROJECT_ROOT, 'config.yaml')

DEFAULT_CLAUDE_SETTINGS = {
    'api_key_env': 'ANTHROPIC_API_KEY',
    'model': 'claude-sonnet-4-5',
    'max_tokens': 2000,
    'temperature': 0.2,
    'timeout': 60,
    'max_retries': 1,
    'prefill_json': True,
}

DEFAULT_PLAN_SETTINGS = {
    'exercises_per_day_min': 5,
    'exercises_per_day_max': 6,
}


def load_config(path=None):
    """
    Load configuration from config.yaml and fill in defaults.

    Args:
        path: Path to the YAML file (defaults to config.yaml in the project root)

    Returns:
        Configuration dictionary with 'claude' and 'plan' sections
    """
    config_path = path or DEFAULT_CONFIG_PATH

    if not os.path.exists(config_path):
        raise ConfigError(f"config.yaml not found at {config_path}")

    with open(config_path, 'r') as f:
        config = yaml.safe_load(f) or {}

    config['claude'] = {**DEFAULT_CLAUDE_SETTINGS, **(config.get('claude') or {})}
    config['plan'] = {**DEFAULT_PLAN_SETTINGS, **(config.get('plan') or {})}
    return config


def get_api_key(config, secrets=None, env_path=None):
    """
    Resolve the Anthropic API key.

    Streamlit secrets win when deployed; locally the key comes from the
    environment, with .env loaded first.

    Args:
        config: Configuration dictionary from load_config
        secrets: Optional mapping such as st.secrets
        env_path: Optional path to a .env file

    Returns:
        The API key string
    """
    api_key_env = (config.get('claude', {}) or {}).get('api_key_env', 'ANTHROPIC_API_KEY')

    if secrets is not None and api_key_env in secrets:
        return secrets[api_key_env]

    load_dotenv(env_path or os.path.join(PROJECT_ROOT, '.env'))
    api_key = os.getenv(api_key_env)

    if not api_key:
        raise ConfigError(
            f"{api_key_env} not found. Copy .env.example to .env and add your Anthropic API key."
        )
    return api_key
