"""Metric families for Node objects."""

from __future__ import annotations

import re
from typing import Any, Callable, Mapping, Sequence

from kubestate.metric import (
    Family,
    FamilyGenerator,
    Metric,
    bool_float,
    condition_metrics,
    creation_timestamp,
    label_keys_values,
    sanitize_label_name,
)
from kubestate.quantity import parse_quantity

_DEFAULT_LABELS = ("node",)
_ROLE_PREFIX = "node-role.kubernetes.io/"

_UNIT_CORE = "core"
_UNIT_BYTE = "byte"
_UNIT_INTEGER = "integer"

_BYTE_RESOURCES = frozenset({"storage", "ephemeral-storage", "memory"})

_HUGE_PAGES_PREFIX = "hugepages-"
_ATTACHABLE_VOLUMES_PREFIX = "attachable-volumes-"
_DEFAULT_NAMESPACE_PREFIX = "kubernetes.io/"
_REQUESTS_PREFIX = "requests."

_QUALIFIED_NAME = re.compile(r"([A-Za-z0-9][-A-Za-z0-9_.]*)?[A-Za-z0-9]")
_DNS1123_SUBDOMAIN = re.compile(
    r"[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*"
)
_QUALIFIED_NAME_MAX = 63
_DNS1123_SUBDOMAIN_MAX = 253


def is_huge_page_resource_name(name: str) -> bool:
    """Whether the resource name denotes huge pages."""
    return name.startswith(_HUGE_PAGES_PREFIX)


def is_attachable_volume_resource_name(name: str) -> bool:
    """Whether the resource name denotes attachable volumes."""
    return name.startswith(_ATTACHABLE_VOLUMES_PREFIX)


def _is_native_resource(name: str) -> bool:
    return "/" not in name or _DEFAULT_NAMESPACE_PREFIX in name


def _is_qualified_name(value: str) -> bool:
    parts = value.split("/")
    if len(parts) == 1:
        name = parts[0]
    elif len(parts) == 2:
        prefix, name = parts
        if (
            not prefix
            or len(prefix) > _DNS1123_SUBDOMAIN_MAX
            or _DNS1123_SUBDOMAIN.fullmatch(prefix) is None
        ):
            return False
    else:
        return False
    return (
        0 < len(name) <= _QUALIFIED_NAME_MAX
        and _QUALIFIED_NAME.fullmatch(name) is not None
    )


def is_extended_resource_name(name: str) -> bool:
    """Whether the resource name is an extended (vendor-defined) resource."""
    if _is_native_resource(name) or name.startswith(_REQUESTS_PREFIX):
        return False
    return _is_qualified_name(_REQUESTS_PREFIX + name)


def _units(resource: str) -> list[str]:
    if resource == "cpu":
        return [_UNIT_CORE]
    if resource in _BYTE_RESOURCES:
        return [_UNIT_BYTE]
    if resource == "pods":
        return [_UNIT_INTEGER]
    units = []
    if is_huge_page_resource_name(resource):
        units.append(_UNIT_BYTE)
    if is_attachable_volume_resource_name(resource):
        units.append(_UNIT_BYTE)
    if is_extended_resource_name(resource):
        units.append(_UNIT_INTEGER)
    return units


def _wrap(func: Callable[[Mapping[str, Any]], Family]) -> Callable[[Any], Family]:
    def generate(obj: Mapping[str, Any]) -> Family:
        family = func(obj)
        name = (obj.get("metadata") or {}).get("name", "")
        for metric in family.metrics:
            metric.label_keys = [*_DEFAULT_LABELS, *metric.label_keys]
            metric.label_values = [name, *metric.label_values]
        return family

    return generate


def _created(node: Mapping[str, Any]) -> Family:
    stamp = creation_timestamp(node)
    return Family(metrics=[] if stamp is None else [Metric(value=float(stamp))])


def _info(node: Mapping[str, Any]) -> Family:
    spec = node.get("spec") or {}
    status = node.get("status") or {}
    info = status.get("nodeInfo") or {}
    internal_ip = ""
    for address in status.get("addresses") or []:
        if address.get("type") == "InternalIP":
            internal_ip = address.get("address", "")
    return Family(
        metrics=[
            Metric(
                label_keys=[
                    "kernel_version",
                    "os_image",
                    "container_runtime_version",
                    "kubelet_version",
                    "kubeproxy_version",
                    "provider_id",
                    "pod_cidr",
                    "internal_ip",
                ],
                label_values=[
                    info.get("kernelVersion", ""),
                    info.get("osImage", ""),
                    info.get("containerRuntimeVersion", ""),
                    info.get("kubeletVersion", ""),
                    info.get("kubeProxyVersion", ""),
                    spec.get("providerID", ""),
                    spec.get("podCIDR", ""),
                    internal_ip,
                ],
                value=1,
            )
        ]
    )


def _role(node: Mapping[str, Any]) -> Family:
    labels = (node.get("metadata") or {}).get("labels") or {}
    return Family(
        metrics=[
            Metric(label_keys=["role"], label_values=[label[len(_ROLE_PREFIX):]], value=1.0)
            for label in labels
            if label.startswith(_ROLE_PREFIX)
        ]
    )


def _taints(node: Mapping[str, Any]) -> Family:
    # Taints repel pods from nodes lacking a matching toleration; many node
    # conditions are also reflected as taints by the node controller.
    taints = (node.get("spec") or {}).get("taints") or []
    return Family(
        metrics=[
            Metric(
                label_keys=["key", "value", "effect"],
                label_values=[taint.get("key", ""), taint.get("value", ""), taint.get("effect", "")],
                value=1,
            )
            for taint in taints
        ]
    )


def _unschedulable(node: Mapping[str, Any]) -> Family:
    flag = bool((node.get("spec") or {}).get("unschedulable", False))
    return Family(metrics=[Metric(value=bool_float(flag))])


def _resources(field: str) -> Callable[[Mapping[str, Any]], Family]:
    def generate(node: Mapping[str, Any]) -> Family:
        metrics = []
        for resource, amount in ((node.get("status") or {}).get(field) or {}).items():
            units = _units(resource)
            if not units:
                continue
            value = parse_quantity(amount).milli_value() / 1000
            label = sanitize_label_name(resource)
            metrics.extend(
                Metric(label_keys=["resource", "unit"], label_values=[label, unit], value=value)
                for unit in units
            )
        return Family(metrics=metrics)

    return generate


def _conditions(node: Mapping[str, Any]) -> Family:
    metrics = []
    for condition in (node.get("status") or {}).get("conditions") or []:
        for metric in condition_metrics(condition.get("status", "")):
            metric.label_keys = ["condition", "status"]
            metric.label_values = [condition.get("type", ""), *metric.label_values]
            metrics.append(metric)
    return Family(metrics=metrics)


def node_metric_families(allow_labels: Sequence[str] | None) -> list[FamilyGenerator]:
    """The metric families produced for a Node."""

    def labels(node: Mapping[str, Any]) -> Family:
        keys, values = label_keys_values((node.get("metadata") or {}).get("labels"), allow_labels)
        return Family(metrics=[Metric(label_keys=keys, label_values=values, value=1)])

    return [
        FamilyGenerator("kube_node_created", "Unix creation timestamp", "gauge", _wrap(_created)),
        FamilyGenerator("kube_node_info", "Information about a cluster node.", "gauge", _wrap(_info)),
        FamilyGenerator(
            "kube_node_labels",
            "Kubernetes labels converted to Prometheus labels.",
            "gauge",
            _wrap(labels),
        ),
        FamilyGenerator("kube_node_role", "The role of a cluster node.", "gauge", _wrap(_role)),
        FamilyGenerator("kube_node_spec_taint", "The taint of a cluster node.", "gauge", _wrap(_taints)),
        FamilyGenerator(
            "kube_node_spec_unschedulable",
            "Whether a node can schedule new pods.",
            "gauge",
            _wrap(_unschedulable),
        ),
        FamilyGenerator(
            "kube_node_status_allocatable",
            "The allocatable for different resources of a node that are available for scheduling.",
            "gauge",
            _wrap(_resources("allocatable")),
        ),
        FamilyGenerator(
            "kube_node_status_capacity",
            "The capacity for different resources of a node.",
            "gauge",
            _wrap(_resources("capacity")),
        ),
        FamilyGenerator(
            "kube_node_status_condition",
            "The condition of a cluster node.",
            "gauge",
            _wrap(_conditions),
        ),
    ]