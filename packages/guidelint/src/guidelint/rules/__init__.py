from .base import BaseRule, Rule
from .layout_rules import IndentWidthRule, LineLengthRule, TabIndentRule, TrailingWhitespaceRule
from .lexical_rules import QuoteStyleRule
from .naming_rules import (
    ConstantCasingRule,
    FunctionCasingRule,
    MacroCasingRule,
    ScopePrefixRule,
    TypeCasingRule,
    VariableCasingRule,
)
from .structure_rules import (
    BracePlacementRule,
    DocCommentRule,
    ExceptionFlowRule,
    FragileConstructRule,
    FunctionAbortRule,
)

__all__ = [
    "BaseRule",
    "BracePlacementRule",
    "ConstantCasingRule",
    "DocCommentRule",
    "ExceptionFlowRule",
    "FragileConstructRule",
    "FunctionAbortRule",
    "FunctionCasingRule",
    "IndentWidthRule",
    "LineLengthRule",
    "MacroCasingRule",
    "QuoteStyleRule",
    "Rule",
    "ScopePrefixRule",
    "TabIndentRule",
    "TrailingWhitespaceRule",
    "TypeCasingRule",
    "VariableCasingRule",
]
