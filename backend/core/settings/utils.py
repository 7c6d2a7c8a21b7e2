"""
Helpers for loading per-environment configuration.

Secrets and connection strings are read with python-decouple from the
`.env.<environment>` file at the repository root when it exists, falling back
to process environment variables otherwise.
"""

from pathlib import Path

from decouple import Config, RepositoryEnv
from decouple import config as default_config

ENV_FILES = {
    "development": ".env.dev",
    "production": ".env.production",
    "test": ".env.test",
}


def load_environment_config(environment):
    """
    Return a decouple config callable bound to the environment's .env file.

    Args:
        environment (str): 'development', 'production' or 'test'

    Returns:
        Callable used as ``config("NAME", default=...)``.
    """
    env_file_name = ENV_FILES.get(environment, ".env")
    env_file_path = Path(__file__).resolve().parents[3] / env_file_name

    if env_file_path.exists():
        print(f"✓ Loading environment: {environment} from {env_file_name}")
        return Config(RepositoryEnv(env_file_path))

    print(f"✗ Warning: {env_file_name} not found, using process environment")
    return default_config
