"""Built-in rewrite rules, keyed by ESTree node kind."""

from dunderjs.rules.generic import GENERIC_RULES as GENERIC_RULES
from dunderjs.rules.modules import MODULE_RULES as MODULE_RULES
from dunderjs.rules.operators import OPERATOR_RULES as OPERATOR_RULES
from dunderjs.walker import merge_rules

BUILTIN_RULES = merge_rules(OPERATOR_RULES, MODULE_RULES, GENERIC_RULES)

__all__ = ["BUILTIN_RULES", "GENERIC_RULES", "MODULE_RULES", "OPERATOR_RULES"]
