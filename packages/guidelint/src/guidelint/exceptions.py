class GuidelintError(Exception):
    """Base class for all linter errors"""


class DuplicateRuleError(GuidelintError):
    """A rule with the same identifier is already registered"""

    def __init__(self, rule_id: str):
        super().__init__(f"Rule '{rule_id}' is already registered")
        self.rule_id = rule_id


class InvalidRuleError(GuidelintError):
    """A rule cannot be registered (reserved or malformed identifier)"""


class RuleEvaluationError(GuidelintError):
    """A rule raised while checking a file. Always converted to a Finding."""

    def __init__(self, rule_id: str, cause: BaseException):
        super().__init__(f"Rule '{rule_id}' failed: {type(cause).__name__}: {cause}")
        self.rule_id = rule_id
        self.cause = cause


class LintCancelled(GuidelintError):
    """Evaluation was cancelled between two rules"""


class ConfigError(GuidelintError):
    """Configuration file could not be read or holds invalid values"""
