from .config import LintConfig, load_config
from .engine import LinterEngine, collect_findings, evaluate
from .exceptions import (
    ConfigError,
    DuplicateRuleError,
    GuidelintError,
    InvalidRuleError,
    LintCancelled,
    RuleEvaluationError,
)
from .models import (
    DEAD_SUPPRESSION_ID,
    RULE_FAILURE_ID,
    FileReport,
    Finding,
    Severity,
    SuppressionDirective,
    SuppressionScope,
)
from .registry import RuleRegistry, build_registry
from .suppression import parse_directives, resolve

__all__ = [
    "ConfigError",
    "DEAD_SUPPRESSION_ID",
    "DuplicateRuleError",
    "FileReport",
    "Finding",
    "GuidelintError",
    "InvalidRuleError",
    "LintCancelled",
    "LintConfig",
    "LinterEngine",
    "RULE_FAILURE_ID",
    "RuleEvaluationError",
    "RuleRegistry",
    "Severity",
    "SuppressionDirective",
    "SuppressionScope",
    "build_registry",
    "collect_findings",
    "evaluate",
    "load_config",
    "parse_directives",
    "resolve",
]
