"""Metric families for LimitRange objects."""

from __future__ import annotations

from typing import Any, Callable, Mapping

from kubestate.metric import Family, FamilyGenerator, Metric, creation_timestamp
from kubestate.quantity import parse_quantity

_DEFAULT_LABELS = ("namespace", "limitrange")
_CONSTRAINTS = ("min", "max", "default", "defaultRequest", "maxLimitRequestRatio")


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


def _limits(limit_range: Mapping[str, Any]) -> Family:
    metrics = []
    for item in (limit_range.get("spec") or {}).get("limits") or []:
        limit_type = item.get("type", "")
        for constraint in _CONSTRAINTS:
            for resource, amount in (item.get(constraint) or {}).items():
                metrics.append(
                    Metric(
                        label_keys=["resource", "type", "constraint"],
                        label_values=[resource, limit_type, constraint],
                        value=parse_quantity(amount).milli_value() / 1000,
                    )
                )
    return Family(metrics=metrics)


def _created(limit_range: Mapping[str, Any]) -> Family:
    stamp = creation_timestamp(limit_range)
    return Family(metrics=[] if stamp is None else [Metric(value=float(stamp))])


def limit_range_metric_families() -> list[FamilyGenerator]:
    """The metric families produced for a LimitRange."""
    return [
        FamilyGenerator(
            "kube_limitrange",
            "Information about limit range.",
            "gauge",
            _wrap(_limits),
        ),
        FamilyGenerator(
            "kube_limitrange_created",
            "Unix creation timestamp",
            "gauge",
            _wrap(_created),
        ),
    ]