"""Environment configuration for the backup stage."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from .errors import ConfigLoadError
from .models import StageConfig

# StageConfig field -> environment variable
ENV_VARS = {
    "month": "MONTH",
    "year": "YEAR",
    "aid": "AID",
    "mongo_uri": "MONGODB_URI",
    "mongo_db_name": "MONGODB_DBNAME",
    "mongo_backup_coll": "MONGODB_BCOLL",
    "access_key_id": "ACCESS_KEY_ID",
    "secret_access_key": "SECRET_ACCESS_KEY",
    "bucket_name": "BUCKET_NAME",
    "endpoint_url": "API_URL",
    "signature_version": "SIGNATURE_VERSION",
}


def config_from_env(environ) -> StageConfig:
    """Build a StageConfig from a mapping of environment variables.

    Unset variables are left out so optional fields keep their defaults and
    required ones are reported as missing.

    Raises:
        ConfigLoadError: naming every variable that is missing or malformed.
    """
    values = {field: environ[var] for field, var in ENV_VARS.items() if var in environ}
    try:
        return StageConfig(**values)
    except ValidationError as e:
        problems = []
        for error in e.errors():
            field = error["loc"][0] if error["loc"] else ""
            var = ENV_VARS.get(field, str(field))
            problems.append(f"{var}: {error['msg']}")
        raise ConfigLoadError(
            "Error loading config values from environment: " + "; ".join(problems)
        ) from e


def load_config(env_file: Optional[Path] = None) -> StageConfig:
    """Load configuration from the process environment.

    Variables from a .env file (the given one, or one found from the current
    directory) fill in anything not already set.
    """
    if env_file is not None:
        if not env_file.exists():
            raise ConfigLoadError(f"Env file not found: {env_file}")
        load_dotenv(env_file)
    else:
        load_dotenv()
    return config_from_env(os.environ)
