"""Metric families for PersistentVolumeClaim objects."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Sequence

from kubestate.metric import (
    Family,
    FamilyGenerator,
    Metric,
    bool_float,
    condition_metrics,
    label_keys_values,
)
from kubestate.quantity import parse_quantity

_DEFAULT_LABELS = ("namespace", "persistentvolumeclaim")
_PHASES = ("Lost", "Bound", "Pending")
_BETA_STORAGE_CLASS_ANNOTATION = "volume.beta.kubernetes.io/storage-class"
_NO_STORAGE_CLASS = "<none>"


def persistent_volume_claim_class(claim: Mapping[str, Any]) -> str:
    """The claim's storage class, or "<none>" if no class was requested."""
    annotations = (claim.get("metadata") or {}).get("annotations") or {}
    if _BETA_STORAGE_CLASS_ANNOTATION in annotations:
        return annotations[_BETA_STORAGE_CLASS_ANNOTATION]
    class_name = (claim.get("spec") or {}).get("storageClassName")
    if class_name is not None:
        return class_name
    return _NO_STORAGE_CLASS


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


def _info(claim: Mapping[str, Any]) -> Family:
    volume_name = (claim.get("spec") or {}).get("volumeName", "")
    return Family(
        metrics=[
            Metric(
                label_keys=["storageclass", "volumename"],
                label_values=[persistent_volume_claim_class(claim), volume_name],
                value=1,
            )
        ]
    )


def _phase(claim: Mapping[str, Any]) -> Family:
    phase = (claim.get("status") or {}).get("phase", "")
    if not phase:
        return Family(metrics=[])
    return Family(
        metrics=[
            Metric(
                label_keys=["phase"],
                label_values=[candidate],
                value=bool_float(phase == candidate),
            )
            for candidate in _PHASES
        ]
    )


def _storage_requests(claim: Mapping[str, Any]) -> Family:
    resources = (claim.get("spec") or {}).get("resources") or {}
    requests = resources.get("requests") or {}
    if "storage" not in requests:
        return Family(metrics=[])
    storage = parse_quantity(requests["storage"])
    return Family(metrics=[Metric(value=float(storage.value()))])


def _access_modes(claim: Mapping[str, Any]) -> Family:
    modes = (claim.get("spec") or {}).get("accessModes") or []
    return Family(
        metrics=[
            Metric(label_keys=["access_mode"], label_values=[mode], value=1)
            for mode in modes
        ]
    )


def _conditions(claim: Mapping[str, Any]) -> Family:
    metrics = []
    for condition in (claim.get("status") or {}).get("conditions") or []:
        for metric in condition_metrics(condition.get("status", "")):
            metric.label_keys = ["condition", "status"]
            metric.label_values = [condition.get("type", ""), *metric.label_values]
            metrics.append(metric)
    return Family(metrics=metrics)


def persistent_volume_claim_metric_families(
    allow_labels: Sequence[str] | None,
) -> list[FamilyGenerator]:
    """The metric families produced for a PersistentVolumeClaim."""

    def labels(claim: Mapping[str, Any]) -> Family:
        keys, values = label_keys_values(
            (claim.get("metadata") or {}).get("labels"), allow_labels
        )
        return Family(metrics=[Metric(label_keys=keys, label_values=values, value=1)])

    return [
        FamilyGenerator(
            "kube_persistentvolumeclaim_labels",
            "Kubernetes labels converted to Prometheus labels.",
            "gauge",
            _wrap(labels),
        ),
        FamilyGenerator(
            "kube_persistentvolumeclaim_info",
            "Information about persistent volume claim.",
            "gauge",
            _wrap(_info),
        ),
        FamilyGenerator(
            "kube_persistentvolumeclaim_status_phase",
            "The phase the persistent volume claim is currently in.",
            "gauge",
            _wrap(_phase),
        ),
        FamilyGenerator(
            "kube_persistentvolumeclaim_resource_requests_storage_bytes",
            "The capacity of storage requested by the persistent volume claim.",
            "gauge",
            _wrap(_storage_requests),
        ),
        FamilyGenerator(
            "kube_persistentvolumeclaim_access_mode",
            "The access mode(s) specified by the persistent volume claim.",
            "gauge",
            _wrap(_access_modes),
        ),
        FamilyGenerator(
            "kube_persistentvolumeclaim_status_condition",
            "Information about status of different conditions of persistent "
            "volume claim.",
            "gauge",
            _wrap(_conditions),
        ),
    ]