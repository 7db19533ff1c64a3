"""Configuration loading from pyproject.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path

DEFAULT_STORE = Path(".filehunt") / "session.toml"


class ConfigError(Exception):
    """Error in filehunt configuration."""


@dataclass(slots=True, frozen=True)
class FilehuntConfig:
    """Configuration loaded from ``[tool.filehunt]`` in pyproject.toml.

    All relative paths are resolved from the project root (directory containing pyproject.toml).

    ``target_origin`` is the origin evaluation results are addressed to. The
    default ``"*"`` accepts any embedding page and has to be replaced by an
    allow-list before a production deployment.
    """

    store: Path | None = None
    report: Path | None = None
    target_origin: str = "*"
    project_root: Path | None = None

    @property
    def store_path(self) -> Path:
        return self.store if self.store is not None else DEFAULT_STORE


def find_pyproject_toml(start_dir: Path | None = None) -> Path | None:
    """Find pyproject.toml by walking up from start_dir.

    Args:
        start_dir: Starting directory. Defaults to current working directory.

    Returns:
        Path to pyproject.toml if found, None otherwise.

    """
    current = (start_dir or Path.cwd()).resolve()

    while True:
        candidate = current / "pyproject.toml"
        if candidate.is_file():
            return candidate
        if current.parent == current:
            return None
        current = current.parent


def _parse_path_option(section: dict[str, object], key: str, project_root: Path) -> Path | None:
    if key not in section:
        return None
    value = section[key]
    if not isinstance(value, str):
        msg = f"Invalid [tool.filehunt].{key}: expected string path"
        raise ConfigError(msg)
    path = Path(value)
    if not path.is_absolute():
        path = project_root / path
    return path


def load_config(pyproject_path: Path) -> FilehuntConfig:
    """Load and validate [tool.filehunt] config from pyproject.toml.

    Raises:
        ConfigError: If the configuration is invalid

    """
    project_root = pyproject_path.parent

    with pyproject_path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {pyproject_path}: {e}"
            raise ConfigError(msg) from e

    section = data.get("tool", {}).get("filehunt", {})
    if not section:
        return FilehuntConfig(project_root=project_root)

    target_origin = section.get("target_origin", "*")
    if not isinstance(target_origin, str) or not target_origin:
        msg = "Invalid [tool.filehunt].target_origin: expected a non-empty string"
        raise ConfigError(msg)

    return FilehuntConfig(
        store=_parse_path_option(section, "store", project_root),
        report=_parse_path_option(section, "report", project_root),
        target_origin=target_origin,
        project_root=project_root,
    )


def get_config() -> FilehuntConfig:
    """Get config from pyproject.toml in current directory or parents."""
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return FilehuntConfig()
    return load_config(pyproject_path)
