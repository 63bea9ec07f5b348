# config_manager.py
import os
from pathlib import Path
import json

from . import error as E
from .log import log

config_json = Path(__file__).resolve().parent / "config.json"

DEFAULT_SETTINGS = {
    "decimal_places": 3,
    "debug": False,
}


def config_path():
    """Path of the active settings file (CALCULATOR_CONFIG overrides the bundled one)."""
    override = os.environ.get("CALCULATOR_CONFIG")
    if override:
        return Path(override)
    return config_json


def load_setting_value(key_value):
    try:
        with open(config_path(), 'r', encoding= 'utf-8') as f:
            settings_dict = json.load(f)

    except (FileNotFoundError, json.JSONDecodeError):
        log.warning(E.ERROR_MESSAGES["5000"] + "%s", config_path())
        settings_dict = {}

    if not isinstance(settings_dict, dict):
        log.warning(E.ERROR_MESSAGES["5000"] + "%s", config_path())
        settings_dict = {}


    if key_value == "all":
        return {**DEFAULT_SETTINGS, **settings_dict}

    else:
        return settings_dict.get(key_value, DEFAULT_SETTINGS.get(key_value, 0))
