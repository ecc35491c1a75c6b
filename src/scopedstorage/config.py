import os
from pathlib import Path
from typing import NamedTuple, Dict, Any, ChainMap, Mapping

from .util import file_util

HOME_ENV_VAR = "SCOPEDSTORAGE_HOME"


def _default_app_settings_home() -> str:
    return os.environ.get(HOME_ENV_VAR) or str(Path.home() / ".scopedstorage")


class Option(NamedTuple):
    key: str
    default: Any
    help: str = ""

    def from_dict(self, config_dict: Mapping[str, Any]):
        value = config_dict.get(self.key)
        return self.default if value is None else value


class Settings:
    APP_SETTINGS_HOME = Option("app_settings_home", None, f"Settings directory (${HOME_ENV_VAR} or ~/.scopedstorage)")
    STORE_FILE = Option("store_file", "storage.json", "Global store file, relative to the settings directory")
    WORKSPACE_STORE_FILE = Option("workspace_store_file", None, "Separate workspace store file (shares the global one if unset)")
    WORKSPACE = Option("workspace", None, "Path of the open workspace")
    WORKSPACE_UID = Option("workspace_uid", None, "Unique id of the open workspace, enables recreate detection")
    LOG_LEVEL = Option("log_level", "INFO", "Logging level")


def get_all_settings() -> list[Option]:
    return [option for _name, option in vars(Settings).items() if isinstance(option, Option)]


def read_config(filename) -> Dict[str, Any]:
    data = file_util.parse_json(filename)
    if not isinstance(data, dict):
        raise ValueError(f"{filename} must contain a JSON object")
    unknown = set(data) - {option.key for option in get_all_settings()}
    if unknown:
        raise ValueError(f"Unknown setting(s) in {filename}: {', '.join(sorted(unknown))}")
    return data


def create_config(*dicts: Dict[str, object]) -> Mapping[str, object]:
    """Creates a dict-like configuration from multiple dictionaries
    Priority order:
    1. command-line arguments
    2. config file
    3. default values
    None values never shadow a lower layer.
    """
    defaults = {option.key: option.default for option in get_all_settings() if option.default is not None}
    defaults[Settings.APP_SETTINGS_HOME.key] = _default_app_settings_home()
    layers = [{k: v for k, v in d.items() if v is not None} for d in dicts]
    return ChainMap({}, *layers, defaults)


def conf_get(d, option: Option):
    return option.from_dict(d)


class Environment:
    """Where the application keeps its settings on disk."""

    def __init__(self, app_settings_home):
        self.app_settings_home = os.path.abspath(os.fspath(app_settings_home))

    @classmethod
    def from_config(cls, conf: Mapping[str, object]) -> "Environment":
        return cls(conf_get(conf, Settings.APP_SETTINGS_HOME) or _default_app_settings_home())

    def resolve(self, filename) -> str:
        return os.path.join(self.app_settings_home, os.fspath(filename))
