"""Platform rule evaluation shared by libraries and argument templates."""

from typing import Mapping, Optional, Sequence

from .models import PlatformRule

ALLOW = "allow"


def rule_matches(rule: PlatformRule, target_os: str,
                 features: Optional[Mapping[str, bool]] = None) -> bool:
    """Check a single rule against the target platform."""
    if rule.action != ALLOW:
        return False
    if rule.os_name is not None and rule.os_name != target_os:
        return False
    if rule.features:
        enabled = features or {}
        for name, wanted in rule.features.items():
            if enabled.get(name, False) != wanted:
                return False
    return True


def evaluate_rules(rules: Sequence[PlatformRule], target_os: str,
                   features: Optional[Mapping[str, bool]] = None) -> bool:
    """Return whether an entry guarded by ``rules`` applies to ``target_os``.

    No rules means always applicable. Otherwise one matching allow rule is
    enough; other rules, including disallow rules, are not consulted.
    """
    if not rules:
        return True
    return any(rule_matches(rule, target_os, features) for rule in rules)
