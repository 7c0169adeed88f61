"""Scope matching between a rule and a query.

Each dimension (event, team) is matched independently; a rule applies to a
query only when both dimensions match. Matching depends on the rule's
polarity because the two query forms ask different questions:

    omitted query value:  does the permission hold for *every* value?
                          Concretely scoped grants cannot show that,
                          concretely scoped revokes disprove it.
    wildcard query value: does the permission hold for *some* value?
                          Concretely scoped grants show that, concretely
                          scoped revokes only affect their own value.

Unscoped and wildcard rule dimensions match every query value.
"""

from __future__ import annotations

from typing import Optional

from ..models.rule import Polarity, Rule, Scope, ScopeValue, Wildcard


def dimension_matches(
    rule_value: Optional[ScopeValue],
    query_value: Optional[ScopeValue],
    polarity: Polarity,
) -> bool:
    """Match a single scope dimension of a rule against a query."""
    if rule_value is None or isinstance(rule_value, Wildcard):
        return True

    if query_value is None:
        return polarity is Polarity.REVOKE
    if isinstance(query_value, Wildcard):
        return polarity is Polarity.GRANT

    return rule_value == query_value


def scope_matches(rule: Rule, scope: Scope) -> bool:
    """Return whether *rule* applies to a query made for *scope*."""
    return (
        dimension_matches(rule.scope.event, scope.event, rule.polarity)
        and dimension_matches(rule.scope.team, scope.team, rule.polarity)
    )
