"""Metric families for PersistentVolume objects."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Sequence

from kubestate.metric import (
    Family,
    FamilyGenerator,
    Metric,
    bool_float,
    label_keys_values,
)
from kubestate.quantity import parse_quantity

_DEFAULT_LABELS = ("persistentvolume",)
_PHASES = ("Pending", "Available", "Bound", "Released", "Failed")

_INFO_KEYS = (
    "storageclass",
    "gce_persistent_disk_name",
    "ebs_volume_id",
    "fc_wwids",
    "fc_lun",
    "fc_target_wwns",
    "iscsi_target_portal",
    "iscsi_iqn",
    "iscsi_lun",
    "iscsi_initiator_name",
    "nfs_server",
    "nfs_path",
)


def _wrap(func: Callable[[Mapping[str, Any]], Family]) -> Callable[[Any], Family]:
    def generate(obj: Mapping[str, Any]) -> Family:
        family = func(obj)
        name = (obj.get("metadata") or {}).get("name", "")
        for metric in family.metrics:
            metric.label_keys = [*_DEFAULT_LABELS, *metric.label_keys]
            metric.label_values = [name, *metric.label_values]
        return family

    return generate


def _claim_ref(volume: Mapping[str, Any]) -> Family:
    claim_ref = (volume.get("spec") or {}).get("claimRef")
    if claim_ref is None:
        return Family(metrics=[])
    return Family(
        metrics=[
            Metric(
                label_keys=["name", "claim_namespace"],
                label_values=[claim_ref.get("name", ""), claim_ref.get("namespace", "")],
                value=1,
            )
        ]
    )


def _phase(volume: Mapping[str, Any]) -> Family:
    phase = (volume.get("status") or {}).get("phase", "")
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


def _source_labels(spec: Mapping[str, Any]) -> dict[str, str]:
    """Labels describing the first volume source that is set."""
    if spec.get("gcePersistentDisk") is not None:
        return {"gce_persistent_disk_name": spec["gcePersistentDisk"].get("pdName", "")}
    if spec.get("awsElasticBlockStore") is not None:
        return {"ebs_volume_id": spec["awsElasticBlockStore"].get("volumeID", "")}
    if spec.get("fc") is not None:
        fc = spec["fc"]
        lun = fc.get("lun")
        return {
            "fc_lun": "" if lun is None else str(int(lun)),
            "fc_target_wwns": ",".join(fc.get("targetWWNs") or []),
            "fc_wwids": ",".join(fc.get("wwids") or []),
        }
    if spec.get("iscsi") is not None:
        iscsi = spec["iscsi"]
        initiator = iscsi.get("initiatorName")
        return {
            "iscsi_target_portal": iscsi.get("targetPortal", ""),
            "iscsi_iqn": iscsi.get("iqn", ""),
            "iscsi_lun": str(int(iscsi.get("lun") or 0)),
            "iscsi_initiator_name": "" if initiator is None else initiator,
        }
    if spec.get("nfs") is not None:
        nfs = spec["nfs"]
        return {"nfs_server": nfs.get("server", ""), "nfs_path": nfs.get("path", "")}
    return {}


def _info(volume: Mapping[str, Any]) -> Family:
    spec = volume.get("spec") or {}
    values = {"storageclass": spec.get("storageClassName", ""), **_source_labels(spec)}
    return Family(
        metrics=[
            Metric(
                label_keys=list(_INFO_KEYS),
                label_values=[values.get(key, "") for key in _INFO_KEYS],
                value=1,
            )
        ]
    )


def _capacity(volume: Mapping[str, Any]) -> Family:
    capacity = (volume.get("spec") or {}).get("capacity") or {}
    storage = parse_quantity(capacity.get("storage", 0))
    return Family(metrics=[Metric(value=float(storage.value()))])


def persistent_volume_metric_families(
    allow_labels: Sequence[str] | None,
) -> list[FamilyGenerator]:
    """The metric families produced for a PersistentVolume."""

    def labels(volume: Mapping[str, Any]) -> Family:
        keys, values = label_keys_values(
            (volume.get("metadata") or {}).get("labels"), allow_labels
        )
        return Family(metrics=[Metric(label_keys=keys, label_values=values, value=1)])

    return [
        FamilyGenerator(
            "kube_persistentvolume_claim_ref",
            "Information about the Persitant Volume Claim Reference.",
            "gauge",
            _wrap(_claim_ref),
        ),
        FamilyGenerator(
            "kube_persistentvolume_labels",
            "Kubernetes labels converted to Prometheus labels.",
            "gauge",
            _wrap(labels),
        ),
        FamilyGenerator(
            "kube_persistentvolume_status_phase",
            "The phase indicates if a volume is available, bound to a claim, "
            "or released by a claim.",
            "gauge",
            _wrap(_phase),
        ),
        FamilyGenerator(
            "kube_persistentvolume_info",
            "Information about persistentvolume.",
            "gauge",
            _wrap(_info),
        ),
        FamilyGenerator(
            "kube_persistentvolume_capacity_bytes",
            "Persistentvolume capacity in bytes.",
            "gauge",
            _wrap(_capacity),
        ),
    ]