"""Path validation for every externally supplied file path."""

from dbdiff.validation.paths import (
    is_path_within_directory,
    is_restricted_system_path,
    validate_config_path,
    validate_log_path,
    validate_output_path,
)

__all__ = [
    "is_path_within_directory",
    "is_restricted_system_path",
    "validate_config_path",
    "validate_log_path",
    "validate_output_path",
]
