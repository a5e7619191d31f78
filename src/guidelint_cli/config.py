from pathlib import Path
from typing import Optional

from guidelint.config import CONFIG_FILE_NAME, LintConfig, load_config
from guidelint.exceptions import ConfigError


def discover_config_file(start: Path) -> Optional[Path]:
    """Nearest .guidelint.toml, or pyproject.toml with a [tool.guidelint] table."""
    for directory in [start, *start.parents]:
        candidate = directory / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
        pyproject = directory / "pyproject.toml"
        if pyproject.is_file() and "[tool.guidelint]" in pyproject.read_text(encoding="utf-8", errors="replace"):
            return pyproject
    return None


def resolve_config(config_file: Optional[Path], **overrides) -> LintConfig:
    """Load the explicit or discovered config file and apply command-line overrides"""
    if config_file is not None and not config_file.is_file():
        raise ConfigError(f"Configuration file {config_file} not found")
    path = config_file if config_file is not None else discover_config_file(Path.cwd())
    return load_config(path).with_overrides(**overrides)
