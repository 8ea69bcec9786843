"""Filesystem helpers for corg."""

from __future__ import annotations

import os
import stat
import tempfile
from importlib import resources
from pathlib import Path
from typing import TextIO

from .constants import DEFAULT_MAX_FILE_SIZE, DOCUMENT_EXTENSIONS, SCRIPT_EXTENSION
from .exceptions import DocumentNotFoundError

MAX_FILE_SIZE_ENV_VAR = "CORG_MAX_FILE_SIZE"
HELPER_RESOURCE = "corg-logger.sh"
HELPER_START = "\n# - start logger:\n"
HELPER_END = "\n# - end logger:\n"
SCRIPT_MODE = 0o755


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Resolve the maximum allowed document size.

    Args:
        default: Fallback value in bytes when the environment variable is unset.

    Returns:
        int: Maximum allowed file size in bytes.

    Raises:
        ValueError: If the environment value is not a positive integer.

    Examples:
        os.environ["CORG_MAX_FILE_SIZE"] = "204800"
        limit = get_max_file_size(default=102400)
    """
    env_value = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if env_value is None:
        return default

    try:
        max_size = int(env_value)
    except ValueError as error:
        error_message = (
            f"Invalid value for {MAX_FILE_SIZE_ENV_VAR}: {env_value} (expected positive integer)"
        )
        raise ValueError(error_message) from error

    if max_size <= 0:
        error_message = f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer, got {max_size}."
        raise ValueError(error_message)

    return max_size


def contains_symlink(path: Path) -> bool:
    """Check whether a path or any parent directory is a symlink."""
    for candidate in (path, *path.parents):
        try:
            if candidate.is_symlink():
                return True
        except OSError:
            continue
    return False


def normalize_filepath(raw_path: str, suffixes: tuple[str, ...] = DOCUMENT_EXTENSIONS) -> Path:
    """Resolve and validate a document or script path.

    Args:
        raw_path: User-supplied path (absolute or relative).
        suffixes: Accepted file extensions, lowercase with leading dot.

    Returns:
        Path: Absolute path to the file.

    Raises:
        ValueError: If the path does not exist, is not a regular file, uses an
            unsupported extension, or traverses a symlink.

    Examples:
        normalize_filepath("runbooks/deploy.md")
        normalize_filepath("scripts/deploy.sh", suffixes=(".sh",))
    """
    path = Path(raw_path).expanduser()

    if contains_symlink(path):
        error_message = f"Symlinks are not supported for security reasons: {path}"
        raise ValueError(error_message)

    try:
        resolved = path.resolve(strict=True)
    except FileNotFoundError as error:
        error_message = f"{path} does not exist."
        raise ValueError(error_message) from error
    except OSError as error:
        error_message = f"Error resolving {path}: {error}"
        raise ValueError(error_message) from error

    if not resolved.is_file():
        error_message = f"{resolved} is not a regular file."
        raise ValueError(error_message)

    if resolved.suffix.lower() not in suffixes:
        error_message = f"{resolved} has an unsupported extension.\n"
        error_message += f"Supported extensions are: {', '.join(suffixes)}"
        raise ValueError(error_message)

    return resolved


def collect_file_stat(filepath: Path) -> os.stat_result:
    """Return stat information for a file while disallowing symlinks.

    Raises:
        IOError: If the path is inaccessible, a symlink, or not a regular file.
    """
    try:
        stat_result = os.stat(filepath, follow_symlinks=False)
    except OSError as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error

    if stat.S_ISLNK(stat_result.st_mode):
        error_message = f"Symlinks are not supported: {filepath}."
        raise IOError(error_message)

    if not stat.S_ISREG(stat_result.st_mode):
        error_message = f"{filepath} is not a regular file."
        raise IOError(error_message)

    return stat_result


def enforce_file_size(stat_result: os.stat_result, max_size: int, filepath: Path):
    """Guard against documents that exceed the configured maximum size.

    Raises:
        IOError: If `stat_result.st_size` exceeds `max_size`.
    """
    if stat_result.st_size > max_size:
        error_message = f"{filepath} exceeds the maximum allowed size of {max_size} bytes."
        raise IOError(error_message)


def safe_read(filepath: Path) -> TextIO:
    """Open a file for reading with consistent error handling.

    Args:
        filepath: Path to the file.

    Returns:
        TextIO: File handle opened for reading in UTF-8.

    Raises:
        IOError: If the path is missing, inaccessible, or not a file.

    Examples:
        with safe_read(Path("runbooks/deploy.md")) as handle:
            content = handle.read()
    """
    try:
        return open(filepath, "r", encoding="UTF-8")
    except (
        FileNotFoundError,
        PermissionError,
        IsADirectoryError,
        NotADirectoryError,
    ) as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error


def _walk_files(root: Path):
    """Yield non-hidden files below `root` in a stable, sorted order."""
    for directory, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(name for name in dirnames if not name.startswith("."))
        for filename in sorted(filenames):
            if not filename.startswith("."):
                yield Path(directory) / filename


def find_document(name: str, extension: str, root: Path) -> Path | None:
    """Find the first file under `root` whose name contains ``<name>.<extension>``.

    Hidden files and directories are skipped. Files of a directory are checked
    before its subdirectories, both in sorted order.

    Args:
        name: Document name without extension, e.g. ``"deploy"``.
        extension: Extension without the dot, e.g. ``"md"``.
        root: Directory to search.

    Returns:
        Path | None: The matching file, or None when nothing matches.

    Examples:
        find_document("deploy", "md", Path.cwd())
    """
    needle = f"{name}.{extension}"
    for path in _walk_files(root):
        if needle in path.name:
            return path
    return None


def find_documents(extension: str, root: Path) -> list[Path]:
    """List every non-hidden file under `root` ending with ``.<extension>``.

    Examples:
        find_documents("md", Path("runbooks"))
    """
    return [path for path in _walk_files(root) if path.name.endswith(f".{extension}")]


def resolve_file(raw_path: str, extension: str, root: Path, suffixes: tuple[str, ...]) -> Path:
    """Resolve a user argument that is either a path or a bare name.

    A bare name (no extension, no such file) is looked up under `root` with
    `find_document`; anything else is treated as a path.

    Args:
        raw_path: Path or name supplied by the user.
        extension: Extension used for name lookups, without the dot.
        root: Directory searched for names.
        suffixes: Accepted file extensions, passed to `normalize_filepath`.

    Returns:
        Path: Absolute, validated path.

    Raises:
        DocumentNotFoundError: If a bare name matches no file.
        ValueError: If the resolved path fails validation.

    Examples:
        resolve_file("deploy", "md", Path.cwd(), (".md",))
    """
    candidate = Path(raw_path).expanduser()
    if not candidate.suffix and not os.path.lexists(candidate):
        found = find_document(raw_path, extension, root)
        if found is None:
            raise DocumentNotFoundError(raw_path, extension)
        raw_path = str(found)
    return normalize_filepath(raw_path, suffixes)


def script_path_for(document: Path, output_dir: Path) -> Path:
    """Return the script path generated for `document`.

    Examples:
        script_path_for(Path("runbooks/deploy.md"), Path("scripts"))  # scripts/deploy.sh
    """
    return output_dir / f"{document.stem}{SCRIPT_EXTENSION}"


def write_script(path: Path, content: str, mode: int = SCRIPT_MODE) -> None:
    """Atomically write an executable script.

    The content goes to a temporary file in the target directory, which is
    synced, given `mode`, and then moved over `path`. Missing parent
    directories are created.

    Args:
        path: Destination of the script.
        content: Script text.
        mode: Permission bits of the written file.

    Returns:
        None.

    Raises:
        IOError: If the directory cannot be created or the file cannot be written.

    Examples:
        write_script(Path("scripts/deploy.sh"), push_shell(events))
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as error:
        error_message = f"Unable to create {path.parent}: {error}"
        raise IOError(error_message) from error

    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w", encoding="UTF-8", delete=False, dir=path.parent, suffix=".tmp"
        ) as tmp_file:
            temp_path = Path(tmp_file.name)
            tmp_file.write(content)
            tmp_file.flush()
            os.fsync(tmp_file.fileno())
            os.chmod(tmp_file.name, mode)

        os.replace(temp_path, path)
    except OSError as error:
        error_message = f"Unable to write {path}: {error}"
        raise IOError(error_message) from error
    finally:
        if temp_path is not None:
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                pass


def helper_library() -> str:
    """Return the bundled shell logging helpers called by generated scripts."""
    resource = resources.files("corg").joinpath("data").joinpath(HELPER_RESOURCE)
    return resource.read_text(encoding="UTF-8")


def write_helper(path: Path) -> None:
    """Write the shell logging helpers to `path`, framed by marker comments.

    Raises:
        IOError: If the file cannot be written.
    """
    write_script(path, f"{HELPER_START}{helper_library()}{HELPER_END}")
