"""
Pricing rule set, parsed once when the catalog is loaded.

Each rule key maps to a typed payload model. A rule that is disabled, or
whose payload does not validate, is treated as absent: pricing then falls
back to its neutral default (no distance fee, multiplier 1).
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from pydantic import BaseModel, ValidationError

from mobile_wash.schemas.pricing_schema import (
    CarTypeMultipliers,
    DistanceFeeRule,
    PricingRule,
)

logger = logging.getLogger(__name__)

DISTANCE_FEE = "distance_fee"
CAR_TYPE_MULTIPLIERS = "car_type_multipliers"

RULE_PAYLOADS: dict[str, type[BaseModel]] = {
    DISTANCE_FEE: DistanceFeeRule,
    CAR_TYPE_MULTIPLIERS: CarTypeMultipliers,
}


def _parse_payload(rule: PricingRule) -> Optional[BaseModel]:
    model = RULE_PAYLOADS[rule.key]
    try:
        if isinstance(rule.value_json, str):
            return model.model_validate_json(rule.value_json)
        return model.model_validate(rule.value_json)
    except ValidationError as exc:
        logger.warning(
            "Pricing rule '%s' has an invalid payload and is ignored: %d error(s)",
            rule.key, exc.error_count(),
        )
        return None


@dataclass(frozen=True)
class PricingRuleSet:
    """Stored rules by key plus the payloads of the ones that are in effect."""

    rules: dict[str, PricingRule] = field(default_factory=dict)
    active: dict[str, BaseModel] = field(default_factory=dict)

    @classmethod
    def from_rules(cls, rules: Iterable[PricingRule]) -> "PricingRuleSet":
        by_key: dict[str, PricingRule] = {}
        for rule in rules:
            by_key[rule.key] = rule

        active: dict[str, BaseModel] = {}
        for key, rule in by_key.items():
            if key not in RULE_PAYLOADS:
                logger.debug("Pricing rule '%s' has no effect on quotes", key)
                continue
            if not rule.enabled:
                logger.debug("Pricing rule '%s' is disabled", key)
                continue
            payload = _parse_payload(rule)
            if payload is not None:
                active[key] = payload

        return cls(rules=by_key, active=active)

    def get_rule(self, key: str) -> Optional[PricingRule]:
        """The stored rule for ``key``, enabled or not; None when absent."""
        return self.rules.get(key)

    @property
    def distance_fee(self) -> Optional[DistanceFeeRule]:
        return self.active.get(DISTANCE_FEE)  # type: ignore[return-value]

    @property
    def car_type_multipliers(self) -> Optional[CarTypeMultipliers]:
        return self.active.get(CAR_TYPE_MULTIPLIERS)  # type: ignore[return-value]


def get_pricing_rules(rule_set: PricingRuleSet) -> list[PricingRule]:
    """Return every stored rule, enabled or not, in key order."""
    return [rule_set.rules[key] for key in sorted(rule_set.rules)]


def get_pricing_rule_by_key(rule_set: PricingRuleSet, key: str) -> Optional[PricingRule]:
    """Get a stored rule by key. Returns None if no rule has that key."""
    return rule_set.get_rule(key)
