import logging
from typing import Dict, Iterable, Iterator, List, Optional

from .config import ALL_RULES, LintConfig
from .exceptions import DuplicateRuleError, InvalidRuleError
from .models import RESERVED_RULE_IDS
from .rules.base import Rule

logger = logging.getLogger(__name__)


def _selected(rule_id: str, patterns: Iterable[str]) -> bool:
    """Exact identifiers or dotted prefixes ('naming' selects 'naming.*')."""
    return any(rule_id == p or rule_id.startswith(p.rstrip(".") + ".") for p in patterns)


class RuleRegistry:
    """Registry of the known rules, in registration order.

    Built once with `build_registry` and only read afterwards, so it can be
    shared between worker threads without locking.
    """

    def __init__(self, rules: Optional[Iterable[Rule]] = None):
        self._rules: Dict[str, Rule] = {}
        for rule in rules or ():
            self.register(rule)

    def register(self, rule: Rule) -> None:
        rule_id = rule.rule_id
        if not rule_id or any(c.isspace() for c in rule_id):
            raise InvalidRuleError(f"Invalid rule identifier {rule_id!r}")
        if rule_id in RESERVED_RULE_IDS:
            raise InvalidRuleError(f"Rule identifier '{rule_id}' is reserved for the engine")
        if rule_id in self._rules:
            raise DuplicateRuleError(rule_id)
        self._rules[rule_id] = rule

    def get(self, rule_id: str) -> Optional[Rule]:
        return self._rules.get(rule_id)

    @property
    def rule_ids(self) -> List[str]:
        return list(self._rules)

    def get_all_rules(self) -> List[Rule]:
        return list(self._rules.values())

    def active_rules(self, config: Optional[LintConfig] = None) -> List[Rule]:
        """Rules enabled by the configuration, in registration order."""
        config = config or LintConfig()
        active = []
        for rule_id, rule in self._rules.items():
            if config.enabled_rules != ALL_RULES and not _selected(rule_id, config.enabled_rules):
                continue
            if _selected(rule_id, config.disabled_rules):
                continue
            active.append(rule)
        return active

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules.values())


def build_registry(config: Optional[LintConfig] = None) -> RuleRegistry:
    """Construct the built-in rules with parameters taken from the configuration."""
    from .rules.layout_rules import IndentWidthRule, LineLengthRule, TabIndentRule, TrailingWhitespaceRule
    from .rules.lexical_rules import QuoteStyleRule
    from .rules.naming_rules import (
        ConstantCasingRule,
        FunctionCasingRule,
        MacroCasingRule,
        ScopePrefixRule,
        TypeCasingRule,
        VariableCasingRule,
    )
    from .rules.structure_rules import (
        BracePlacementRule,
        DocCommentRule,
        ExceptionFlowRule,
        FragileConstructRule,
        FunctionAbortRule,
    )

    config = config or LintConfig()
    registry = RuleRegistry()
    registry.register(TrailingWhitespaceRule())
    registry.register(LineLengthRule(max_length=config.max_line_length, tab_width=config.tab_width))
    registry.register(TabIndentRule())
    registry.register(IndentWidthRule())
    registry.register(QuoteStyleRule(quote_style=config.quote_style))
    registry.register(FunctionCasingRule())
    registry.register(VariableCasingRule())
    registry.register(ConstantCasingRule())
    registry.register(TypeCasingRule())
    registry.register(ScopePrefixRule())
    registry.register(MacroCasingRule())
    registry.register(BracePlacementRule())
    registry.register(DocCommentRule(min_lines=config.doc_min_lines))
    registry.register(FunctionAbortRule())
    registry.register(FragileConstructRule())
    registry.register(ExceptionFlowRule())
    logger.debug("Registered %d built-in rules", len(registry))
    return registry
