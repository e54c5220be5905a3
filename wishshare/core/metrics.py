"""
Prometheus metrics exposed at /metrics.
"""

from prometheus_client import Counter

ITEM_TRANSITIONS = Counter(
    "wishshare_item_transitions_total",
    "Item lifecycle transitions by outcome",
    ["transition", "outcome"],
)

POLICY_DENIALS = Counter(
    "wishshare_policy_denials_total",
    "Requests refused by the authorization policy, by reason",
    ["reason"],
)
