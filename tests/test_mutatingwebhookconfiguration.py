import re

import pytest

from kubestate.metric import compose_metric_gen_funcs, extract_metric_family_headers
from kubestate.mutatingwebhookconfiguration import (
    mutating_webhook_configuration_metric_families,
)

_SAMPLE = re.compile(r"^(\w+)(?:\{(.*)\})? (\S+)$")
_LABEL = re.compile(r'(\w+)="((?:[^"\\]|\\.)*)"')


def _normalise(line):
    line = line.strip()
    if line.startswith("#"):
        return line
    name, body, value = _SAMPLE.match(line).groups()
    labels = sorted(_LABEL.findall(body or ""))
    return name + "{" + ",".join(f'{k}="{v}"' for k, v in labels) + "} " + value


def _render(families, obj, names=None):
    lines = set()
    generated = compose_metric_gen_funcs(families)(obj)
    for family, header in zip(generated, extract_metric_family_headers(families)):
        if names is not None and family.name not in names:
            continue
        lines.update(header.splitlines())
        lines.update(_normalise(l) for l in family.to_text().splitlines())
    return lines


def _expected(text):
    return {_normalise(l) for l in text.splitlines() if l.strip()}


CASES = [
    (
        {
            "metadata": {
                "name": "mutatingwebhookconfiguration1",
                "namespace": "ns1",
                "resourceVersion": "123456",
            }
        },
        """
        # HELP kube_mutatingwebhookconfiguration_info Information about the MutatingWebhookConfiguration.
        # HELP kube_mutatingwebhookconfiguration_metadata_resource_version Resource version representing a specific version of the MutatingWebhookConfiguration.
        # TYPE kube_mutatingwebhookconfiguration_info gauge
        # TYPE kube_mutatingwebhookconfiguration_metadata_resource_version gauge
        kube_mutatingwebhookconfiguration_info{mutatingwebhookconfiguration="mutatingwebhookconfiguration1",namespace="ns1"} 1
        kube_mutatingwebhookconfiguration_metadata_resource_version{mutatingwebhookconfiguration="mutatingwebhookconfiguration1",namespace="ns1"} 123456
        """,
        [
            "kube_mutatingwebhookconfiguration_info",
            "kube_mutatingwebhookconfiguration_metadata_resource_version",
        ],
    ),
    (
        {
            "metadata": {
                "name": "mutatingwebhookconfiguration2",
                "namespace": "ns2",
                "creationTimestamp": 1501569018,
                "resourceVersion": "abcdef",
            }
        },
        """
        # HELP kube_mutatingwebhookconfiguration_created Unix creation timestamp.
        # HELP kube_mutatingwebhookconfiguration_info Information about the MutatingWebhookConfiguration.
        # HELP kube_mutatingwebhookconfiguration_metadata_resource_version Resource version representing a specific version of the MutatingWebhookConfiguration.
        # TYPE kube_mutatingwebhookconfiguration_created gauge
        # TYPE kube_mutatingwebhookconfiguration_info gauge
        # TYPE kube_mutatingwebhookconfiguration_metadata_resource_version gauge
        kube_mutatingwebhookconfiguration_created{mutatingwebhookconfiguration="mutatingwebhookconfiguration2",namespace="ns2"} 1.501569018e+09
        kube_mutatingwebhookconfiguration_info{mutatingwebhookconfiguration="mutatingwebhookconfiguration2",namespace="ns2"} 1
        """,
        [
            "kube_mutatingwebhookconfiguration_created",
            "kube_mutatingwebhookconfiguration_info",
            "kube_mutatingwebhookconfiguration_metadata_resource_version",
        ],
    ),
]


@pytest.mark.parametrize("obj, want, names", CASES)
def test_mutating_webhook_configuration_store(obj, want, names):
    families = mutating_webhook_configuration_metric_families()
    assert _render(families, obj, names) == _expected(want)


def test_created_missing_without_timestamp():
    families = mutating_webhook_configuration_metric_families()
    generated = compose_metric_gen_funcs(families)({"metadata": {"name": "x"}})
    created = [f for f in generated if f.name.endswith("_created")][0]
    assert created.metrics == []