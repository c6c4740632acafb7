"""Metric families for MutatingWebhookConfiguration objects."""

from __future__ import annotations

from typing import Any, Callable, Mapping

from kubestate.metric import (
    Family,
    FamilyGenerator,
    Metric,
    creation_timestamp,
    resource_version_metric,
)

_DEFAULT_LABELS = ("namespace", "mutatingwebhookconfiguration")


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


def _info(_config: Mapping[str, Any]) -> Family:
    return Family(metrics=[Metric(value=1)])


def _created(config: Mapping[str, Any]) -> Family:
    stamp = creation_timestamp(config)
    return Family(metrics=[] if stamp is None else [Metric(value=float(stamp))])


def _resource_version(config: Mapping[str, Any]) -> Family:
    version = (config.get("metadata") or {}).get("resourceVersion", "")
    return Family(metrics=resource_version_metric(version))


def mutating_webhook_configuration_metric_families() -> list[FamilyGenerator]:
    """The metric families produced for a MutatingWebhookConfiguration."""
    return [
        FamilyGenerator(
            "kube_mutatingwebhookconfiguration_info",
            "Information about the MutatingWebhookConfiguration.",
            "gauge",
            _wrap(_info),
        ),
        FamilyGenerator(
            "kube_mutatingwebhookconfiguration_created",
            "Unix creation timestamp.",
            "gauge",
            _wrap(_created),
        ),
        FamilyGenerator(
            "kube_mutatingwebhookconfiguration_metadata_resource_version",
            "Resource version representing a specific version of the "
            "MutatingWebhookConfiguration.",
            "gauge",
            _wrap(_resource_version),
        ),
    ]