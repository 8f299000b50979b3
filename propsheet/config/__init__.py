from .core import (
    DatabaseSettings,
    LoggingSettings,
    RuntimeSettings,
    Settings,
    last_yaml_path,
    load_settings,
    sanitize_dict,
    _project_root,
    _data_dir,
)

__all__ = [
    "DatabaseSettings",
    "LoggingSettings",
    "RuntimeSettings",
    "Settings",
    "last_yaml_path",
    "load_settings",
    "sanitize_dict",
    "_project_root",
    "_data_dir",
]
