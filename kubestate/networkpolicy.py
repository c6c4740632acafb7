"""Metric families for NetworkPolicy objects."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Sequence

from kubestate.metric import (
    Family,
    FamilyGenerator,
    Metric,
    creation_timestamp,
    label_keys_values,
)

_DEFAULT_LABELS = ("namespace", "networkpolicy")
# Unix seconds of the zero time value, reported when no timestamp is set.
_ZERO_TIME_UNIX = -62135596800


def _wrap(func: Callable[[Mapping[str, Any]], Family]) -> Callable[[Any], Family]:
    def generate(obj: Mapping[str, Any]) -> Family:
        family = func(obj)
        meta = obj.get("metadata") or {}
        prefix = [meta.get("namespace", ""), meta.get("name", "")]
        for metric in family.metrics:
            metric.label_keys = [*_DEFAULT_LABELS, *metric.label_keys]
            metric.label_values = [*prefix, *metric.label_values]
        return family

    return generate


def _created(policy: Mapping[str, Any]) -> Family:
    stamp = creation_timestamp(policy)
    value = _ZERO_TIME_UNIX if stamp is None else stamp
    return Family(metrics=[Metric(value=float(value))])


def _rule_count(direction: str) -> Callable[[Mapping[str, Any]], Family]:
    def count(policy: Mapping[str, Any]) -> Family:
        rules = (policy.get("spec") or {}).get(direction) or []
        return Family(metrics=[Metric(value=float(len(rules)))])

    return count


def network_policy_metric_families(allow_labels: Sequence[str] | None) -> list[FamilyGenerator]:
    """The metric families produced for a NetworkPolicy."""

    def labels(policy: Mapping[str, Any]) -> Family:
        keys, values = label_keys_values((policy.get("metadata") or {}).get("labels"), allow_labels)
        return Family(metrics=[Metric(label_keys=keys, label_values=values, value=1)])

    return [
        FamilyGenerator(
            "kube_networkpolicy_created",
            "Unix creation timestamp of network policy",
            "gauge",
            _wrap(_created),
        ),
        FamilyGenerator(
            "kube_networkpolicy_labels",
            "Kubernetes labels converted to Prometheus labels",
            "gauge",
            _wrap(labels),
        ),
        FamilyGenerator(
            "kube_networkpolicy_spec_ingress_rules",
            "Number of ingress rules on the networkpolicy",
            "gauge",
            _wrap(_rule_count("ingress")),
        ),
        FamilyGenerator(
            "kube_networkpolicy_spec_egress_rules",
            "Number of egress rules on the networkpolicy",
            "gauge",
            _wrap(_rule_count("egress")),
        ),
    ]