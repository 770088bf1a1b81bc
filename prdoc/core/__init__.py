"""Core types shared by every layer."""

from .config import Config, ConfigError, find_config, load_config
from .errors import ErrorCode
from .result import Err, Ok, Result, is_err, is_ok, partition

__all__ = [
    # config
    "Config",
    "ConfigError",
    "find_config",
    "load_config",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
    "partition",
]
