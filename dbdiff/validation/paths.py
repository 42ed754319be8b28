"""Validation of externally supplied file paths.

Every output, config and log path coming from the user or from configuration
passes through one of the ``validate_*`` functions below before anything is
read from or written to it. The checks are:

- the path is not blank and contains no NUL characters
- separators are normalized and the path is resolved to an absolute path
  (``..`` segments and symlinks are collapsed by ``Path.resolve``)
- output/config paths name a file, and that file name is legal on this OS
- the path stays inside ``allowed_base`` when one is given
- the path is not inside an operating-system directory
"""

import logging
import os
import sys
from pathlib import Path, PurePath

from dbdiff.errors import InputValidationError, PathSecurityError

logger = logging.getLogger(__name__)

IS_WINDOWS = os.name == "nt"

# Windows and the default macOS filesystems compare names case-insensitively
CASE_INSENSITIVE = IS_WINDOWS or sys.platform == "darwin"

CONFIG_EXTENSION = ".json"

if IS_WINDOWS:
    INVALID_FILE_NAME_CHARS = frozenset('<>:"/\\|?*' + "".join(chr(code) for code in range(32)))
else:
    INVALID_FILE_NAME_CHARS = frozenset("\0/")

POSIX_RESTRICTED_PATHS = (
    "/bin",
    "/sbin",
    "/usr/bin",
    "/usr/sbin",
    "/etc",
    "/sys",
    "/proc",
    "/boot",
    "/root",
)


def restricted_system_paths() -> tuple[Path, ...]:
    """Return the directory trees no externally supplied path may point into."""
    if IS_WINDOWS:
        system_root = os.environ.get("SystemRoot", r"C:\Windows")
        drive = PurePath(system_root).drive or "C:"
        candidates = [
            system_root,
            os.environ.get("ProgramFiles", rf"{drive}\Program Files"),
            os.environ.get("ProgramFiles(x86)", rf"{drive}\Program Files (x86)"),
            os.environ.get("ProgramData", rf"{drive}\ProgramData"),
        ]
        return tuple(Path(candidate) for candidate in candidates)

    candidates = list(POSIX_RESTRICTED_PATHS)
    if sys.platform == "darwin":
        # /etc is a symlink to /private/etc, and resolved paths carry the target
        candidates += ["/private/etc"]
    return tuple(Path(candidate) for candidate in candidates)


def system_root() -> Path:
    """Return the filesystem root holding the operating system."""
    if IS_WINDOWS:
        drive = PurePath(os.environ.get("SystemRoot", r"C:\Windows")).drive or "C:"
        return Path(drive + "\\")
    return Path("/")


def _fold(part: str) -> str:
    return part.casefold() if CASE_INSENSITIVE else part


def _parts(path: PurePath) -> list[str]:
    return [_fold(part) for part in path.parts]


def is_path_within_directory(path: PurePath, directory: PurePath) -> bool:
    """Check whether ``path`` equals ``directory`` or is nested under it.

    Comparison is by whole path components, so ``/srv/data2`` is not inside
    ``/srv/data``.
    """
    path_parts = _parts(path)
    directory_parts = _parts(directory)
    return path_parts[: len(directory_parts)] == directory_parts


def is_restricted_system_path(path: PurePath) -> bool:
    """Check whether ``path`` is the system root or lies in a deny-listed directory."""
    if _parts(path) == _parts(system_root()):
        return True
    return any(is_path_within_directory(path, restricted) for restricted in restricted_system_paths())


def _resolve(raw: str | os.PathLike[str] | None, label: str) -> tuple[str, Path]:
    """Reject blank input, normalize separators and resolve to an absolute path.

    Returns:
        Tuple of (separator-normalized input, resolved absolute path)
    """
    text = os.fspath(raw) if raw is not None else ""
    if not text.strip():
        raise InputValidationError(f"{label} cannot be null or empty.")
    if "\0" in text:
        raise InputValidationError(f"{label} contains a NUL character.")

    normalized = text.replace("/", os.sep).replace("\\", os.sep)
    try:
        absolute = Path(normalized).resolve()
    except (OSError, ValueError, RuntimeError) as e:
        raise InputValidationError(f"Invalid {label.lower()} format: {e}") from e
    return normalized, absolute


def _check_file_name(normalized: str, absolute: Path) -> None:
    last_segment = normalized.rstrip().rsplit(os.sep, 1)[-1]
    if last_segment in ("", ".", ".."):
        raise InputValidationError("Path must include a file name.")

    file_name = absolute.name
    if not file_name.strip():
        raise InputValidationError("Path must include a file name.")
    if any(char in INVALID_FILE_NAME_CHARS for char in file_name):
        raise InputValidationError(f"File name contains invalid characters: {file_name!r}")


def _check_allowed_base(absolute: Path, allowed_base: str | os.PathLike[str] | None, label: str) -> None:
    if allowed_base is None or not os.fspath(allowed_base).strip():
        return
    base = Path(os.fspath(allowed_base)).resolve()
    if not is_path_within_directory(absolute, base):
        raise PathSecurityError(f"{label} '{absolute}' is outside the allowed directory '{base}'.")


def _check_not_system(absolute: Path, action: str) -> None:
    if is_restricted_system_path(absolute):
        logger.warning(f"Rejected path inside a system directory: {absolute}")
        raise PathSecurityError(f"Cannot {action} system directory: {absolute}")


def _check_directory_writable(directory: Path) -> None:
    """Walk up to the nearest existing ancestor and make sure it accepts writes."""
    current = directory
    while not current.exists():
        if current.parent == current:
            return
        current = current.parent
    if current.is_dir() and not os.access(current, os.W_OK):
        raise PathSecurityError(f"Directory is read-only: {current}")


def validate_output_path(
    path: str | os.PathLike[str] | None,
    allowed_base: str | os.PathLike[str] | None = None,
) -> Path:
    """Validate that an output file path is safe to write to.

    Args:
        path: The path to validate (relative paths resolve against the working directory)
        allowed_base: Optional directory the output must stay inside

    Returns:
        The validated absolute path

    Raises:
        InputValidationError: If the path is blank, malformed, or names no valid file
        PathSecurityError: If the path escapes ``allowed_base``, points into a
            system directory, or its directory is read-only
    """
    normalized, absolute = _resolve(path, "Path")
    _check_file_name(normalized, absolute)
    _check_allowed_base(absolute, allowed_base, "Output path")
    _check_not_system(absolute, "write to")
    _check_directory_writable(absolute.parent)
    return absolute


def validate_config_path(
    path: str | os.PathLike[str] | None,
    allowed_base: str | os.PathLike[str] | None = None,
    extension: str = CONFIG_EXTENSION,
) -> Path:
    """Validate that a configuration file path is safe to read from.

    Location checks run before the existence check, so a path outside the
    allowed directories is reported as a security error whether or not the
    file exists.

    Args:
        path: The path to validate
        allowed_base: Optional directory the config file must stay inside
        extension: Required file extension, compared case-insensitively

    Returns:
        The validated absolute path

    Raises:
        InputValidationError: If the path is blank, malformed, or has the wrong extension
        PathSecurityError: If the path escapes ``allowed_base`` or points into a system directory
        FileNotFoundError: If no file exists at the path
    """
    normalized, absolute = _resolve(path, "Path")
    _check_file_name(normalized, absolute)
    _check_allowed_base(absolute, allowed_base, "Configuration path")
    _check_not_system(absolute, "read configuration from")

    if not absolute.is_file():
        raise FileNotFoundError(f"Configuration file not found: {absolute}")

    if absolute.suffix.lower() != extension.lower():
        raise InputValidationError(
            f"Configuration file must be a {extension.lstrip('.').upper()} file. Got: '{absolute.suffix}'"
        )

    return absolute


def validate_log_path(path: str | os.PathLike[str] | None) -> Path:
    """Validate that a log file path is safe to write to.

    Args:
        path: The path to validate

    Returns:
        The validated absolute path

    Raises:
        InputValidationError: If the path is blank or malformed
        PathSecurityError: If the path points into a system directory
    """
    _, absolute = _resolve(path, "Log path")
    _check_not_system(absolute, "write logs to")
    return absolute
