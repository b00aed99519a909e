import configparser
import os

CONFIG_FILE = "ocischema.ini"
CONFIG_ENV = "OCISCHEMA_CONFIG"

DEFAULTS = {
    "schema_dir": "",
    "format_mode": "strict",
    "log_level": "WARNING",
}

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def config_path() -> str:
    return os.getenv(CONFIG_ENV, CONFIG_FILE)


def get_config():
    config = configparser.ConfigParser(defaults=DEFAULTS)
    path = config_path()
    if os.path.exists(path):
        config.read(path)
    return config


def save_config(config):
    with open(config_path(), "w") as configfile:
        config.write(configfile)


def get_setting(name: str) -> str:
    if name not in DEFAULTS:
        raise ValueError(f"Unknown setting {name}")
    return get_config()["DEFAULT"][name]
