"""Metric families for Namespace objects."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Sequence

from kubestate.metric import (
    Family,
    FamilyGenerator,
    Metric,
    bool_float,
    condition_metrics,
    creation_timestamp,
    label_keys_values,
)

_DEFAULT_LABELS = ("namespace",)
_PHASES = ("Active", "Terminating")


def _wrap(func: Callable[[Mapping[str, Any]], Family]) -> Callable[[Any], Family]:
    def generate(obj: Mapping[str, Any]) -> Family:
        family = func(obj)
        name = (obj.get("metadata") or {}).get("name", "")
        for metric in family.metrics:
            metric.label_keys = [*_DEFAULT_LABELS, *metric.label_keys]
            metric.label_values = [name, *metric.label_values]
        return family

    return generate


def _created(namespace: Mapping[str, Any]) -> Family:
    stamp = creation_timestamp(namespace)
    return Family(metrics=[] if stamp is None else [Metric(value=float(stamp))])


def _phase(namespace: Mapping[str, Any]) -> Family:
    phase = (namespace.get("status") or {}).get("phase", "")
    return Family(
        metrics=[
            Metric(label_keys=["phase"], label_values=[candidate], value=bool_float(phase == candidate))
            for candidate in _PHASES
        ]
    )


def _conditions(namespace: Mapping[str, Any]) -> Family:
    metrics = []
    for condition in (namespace.get("status") or {}).get("conditions") or []:
        for metric in condition_metrics(condition.get("status", "")):
            metric.label_keys = ["condition", "status"]
            metric.label_values = [condition.get("type", ""), *metric.label_values]
            metrics.append(metric)
    return Family(metrics=metrics)


def namespace_metric_families(allow_labels: Sequence[str] | None) -> list[FamilyGenerator]:
    """The metric families produced for a Namespace."""

    def labels(namespace: Mapping[str, Any]) -> Family:
        keys, values = label_keys_values(
            (namespace.get("metadata") or {}).get("labels"), allow_labels
        )
        return Family(metrics=[Metric(label_keys=keys, label_values=values, value=1)])

    return [
        FamilyGenerator("kube_namespace_created", "Unix creation timestamp", "gauge", _wrap(_created)),
        FamilyGenerator(
            "kube_namespace_labels",
            "Kubernetes labels converted to Prometheus labels.",
            "gauge",
            _wrap(labels),
        ),
        FamilyGenerator(
            "kube_namespace_status_phase",
            "kubernetes namespace status phase.",
            "gauge",
            _wrap(_phase),
        ),
        FamilyGenerator(
            "kube_namespace_status_condition",
            "The condition of a namespace.",
            "gauge",
            _wrap(_conditions),
        ),
    ]