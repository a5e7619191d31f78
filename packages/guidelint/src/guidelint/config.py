import logging
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional, Union

from guidelint_syntax.profiles import PROFILES

from .exceptions import ConfigError
from .models import Severity

logger = logging.getLogger(__name__)

ALL_RULES = "all"
DEFAULT_MARKER = "nolint"
CONFIG_FILE_NAME = ".guidelint.toml"


@dataclass(frozen=True)
class LintConfig:
    """Options recognized by the registry, the rules and the engine"""

    max_line_length: Optional[int] = None  # None: the language profile decides
    enabled_rules: Union[str, FrozenSet[str]] = ALL_RULES
    disabled_rules: FrozenSet[str] = frozenset()
    suppression_marker: str = DEFAULT_MARKER
    language: Optional[str] = None
    quote_style: Optional[str] = None
    tab_width: int = 8
    doc_min_lines: int = 5
    workers: int = 1
    min_severity: Severity = Severity.INFO
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)

    def with_overrides(self, **overrides: Any) -> "LintConfig":
        """Copy with the given non-None values applied."""
        values = {k: v for k, v in overrides.items() if v is not None}
        return _validated(replace(self, **_coerce(values)))

    @classmethod
    def from_file(cls, path: Optional[Path]) -> "LintConfig":
        return load_config(path)


_KEYS = {
    "max-line-length": "max_line_length",
    "enabled-rules": "enabled_rules",
    "disabled-rules": "disabled_rules",
    "suppression-marker": "suppression_marker",
    "language": "language",
    "quote-style": "quote_style",
    "tab-width": "tab_width",
    "doc-min-lines": "doc_min_lines",
    "workers": "workers",
    "min-severity": "min_severity",
}


def load_config(path: Optional[Path]) -> LintConfig:
    """Read a .guidelint.toml ([guidelint] table) or pyproject.toml ([tool.guidelint]).

    A missing file yields the defaults. Malformed TOML or invalid values
    raise ConfigError.
    """
    if path is None or not path.exists():
        return LintConfig()

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{path}: invalid TOML: {e}") from e
    except OSError as e:
        raise ConfigError(f"{path}: cannot read configuration: {e}") from e

    if path.name == "pyproject.toml":
        section = data.get("tool", {}).get("guidelint", {})
    else:
        section = data.get("guidelint", data)

    values: Dict[str, Any] = {}
    extra: Dict[str, Any] = {}
    for key, value in section.items():
        if key in _KEYS:
            values[_KEYS[key]] = value
        else:
            extra[key] = value
    if extra:
        logger.warning("Ignoring unknown configuration keys in %s: %s", path, ", ".join(sorted(extra)))

    logger.debug("Loaded configuration from %s", path)
    return _validated(LintConfig(extra=extra, **_coerce(values)))


def _coerce(values: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(values)
    for key in ("enabled_rules", "disabled_rules"):
        if key not in out:
            continue
        value = out[key]
        if key == "enabled_rules" and value == ALL_RULES:
            continue
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, (list, tuple, set, frozenset)) or not all(isinstance(v, str) for v in value):
            raise ConfigError(f"'{key}' must be a list of rule identifiers")
        out[key] = frozenset(value)
    if "min_severity" in out and not isinstance(out["min_severity"], Severity):
        try:
            out["min_severity"] = Severity(str(out["min_severity"]).upper())
        except ValueError:
            raise ConfigError(f"Unknown severity '{out['min_severity']}'") from None
    return out


def _validated(config: LintConfig) -> LintConfig:
    for name in ("tab_width", "doc_min_lines", "workers"):
        value = getattr(config, name)
        if not isinstance(value, int) or value < 1:
            raise ConfigError(f"'{name}' must be a positive integer, got {value!r}")
    if config.max_line_length is not None and (
        not isinstance(config.max_line_length, int) or config.max_line_length < 1
    ):
        raise ConfigError(f"'max_line_length' must be a positive integer, got {config.max_line_length!r}")
    if config.language is not None and config.language not in PROFILES:
        raise ConfigError(f"Unknown language '{config.language}' (known: {', '.join(sorted(PROFILES))})")
    if config.quote_style is not None and config.quote_style not in ("single", "double"):
        raise ConfigError(f"'quote_style' must be 'single' or 'double', got {config.quote_style!r}")
    if not config.suppression_marker or any(c.isspace() for c in config.suppression_marker):
        raise ConfigError("'suppression_marker' must be a non-empty word")
    return config
