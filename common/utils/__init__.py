from os import environ

# add logger
import logging
logger = logging.getLogger(__name__)
# set logger to standard out
logger.addHandler(logging.StreamHandler())
# set log level
logger.setLevel(logging.INFO)

TRUTHY = {"1", "true", "yes", "on"}

def safe_get_env_var(key, default=""):
    """Read an environment variable, stripped, falling back to `default` when unset."""
    try:
        return environ[key].strip()
    except KeyError:
        logger.debug(f"Missing {key} environment variable, using default")
        return default

def env_flag(key, default=False):
    value = safe_get_env_var(key, None)
    if value is None or value == "":
        return default
    return value.lower() in TRUTHY

def env_int(key, default):
    value = safe_get_env_var(key, None)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"{key} is not an integer ({value!r}), using {default}")
        return default

def split_csv(value):
    """Split a comma separated setting into a list of non-empty, stripped items."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]
