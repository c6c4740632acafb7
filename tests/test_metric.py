from datetime import datetime, timezone

import pytest

from kubestate.metric import (
    Family,
    FamilyGenerator,
    Metric,
    bool_float,
    compose_metric_gen_funcs,
    condition_metrics,
    creation_timestamp,
    extract_metric_family_headers,
    format_value,
    label_keys_values,
    resource_version_metric,
    sanitize_label_name,
)


@pytest.mark.parametrize(
    "value, text",
    [
        (1.5e9, "1.5e+09"),
        (123456, "123456"),
        (4.3, "4.3"),
        (5368709120, "5.36870912e+09"),
        (1, "1"),
        (0, "0"),
        (1e9, "1e+09"),
        (1000, "1000"),
        (1501569018, "1.501569018e+09"),
    ],
)
def test_format_value(value, text):
    assert format_value(value) == text


def test_format_value_nan():
    assert format_value(float("nan")) == "NaN"


def test_format_value_round_trips():
    for value in (0.1, 2.5e-7, 987654.321, -42.0, 3e15):
        assert float(format_value(value)) == value


def test_family_to_text():
    family = Family(name="kube_x", metrics=[Metric(["a"], ["b"], 1)])
    assert family.to_text() == 'kube_x{a="b"} 1\n'


def test_family_without_labels():
    family = Family(name="kube_x", metrics=[Metric(value=123456)])
    assert family.to_text().split() == ["kube_x", "123456"]


def test_family_escapes_label_values():
    family = Family(name="m", metrics=[Metric(["k"], ['a"b\nc'], 1)])
    text = family.to_text()
    assert text.count("\n") == 1
    assert text.endswith(" 1\n")


def test_family_mismatched_labels():
    with pytest.raises(ValueError):
        Family(name="m", metrics=[Metric(["a", "b"], ["x"], 1)]).to_text()


def test_generator_and_headers():
    gen = FamilyGenerator(
        "kube_limitrange_created",
        "Unix creation timestamp",
        "gauge",
        lambda obj: Family(metrics=[Metric(value=obj)]),
    )
    families = compose_metric_gen_funcs([gen])(7)
    assert [f.name for f in families] == ["kube_limitrange_created"]
    assert families[0].metrics[0].value == 7
    assert extract_metric_family_headers([gen]) == [
        "# HELP kube_limitrange_created Unix creation timestamp\n"
        "# TYPE kube_limitrange_created gauge"
    ]


def test_bool_float():
    assert bool_float(True) == 1.0
    assert bool_float(False) == 0.0


@pytest.mark.parametrize("status", ["True", "False", "Unknown"])
def test_condition_metrics(status):
    metrics = condition_metrics(status)
    assert [m.label_values for m in metrics] == [["true"], ["false"], ["unknown"]]
    assert sum(m.value for m in metrics) == 1
    chosen = [m for m in metrics if m.value == 1][0]
    assert chosen.label_values == [status.lower()]


def test_sanitize_label_name():
    assert sanitize_label_name("nvidia.com/gpu") == "nvidia_com_gpu"


def test_label_keys_values_without_allow_list():
    assert label_keys_values({"app": "example1"}, None) == ([], [])


def test_label_keys_values_wildcard():
    keys, values = label_keys_values({"l2": "label2", "app": "example2"}, ["*"])
    assert keys == ["label_app", "label_l2"]
    assert values == ["example2", "label2"]


def test_label_keys_values_allow_list():
    keys, values = label_keys_values({"app": "x", "other": "y"}, ["app", "missing"])
    assert values == ["x"]
    assert len(keys) == 1


def test_resource_version_metric():
    assert [m.value for m in resource_version_metric("123456")] == [123456]
    assert resource_version_metric("abcdef") == []
    assert resource_version_metric("") == []


def test_creation_timestamp_variants():
    stamp = 1501569018
    iso = datetime.fromtimestamp(stamp, timezone.utc).isoformat()
    assert creation_timestamp({"metadata": {"creationTimestamp": stamp}}) == stamp
    assert creation_timestamp({"metadata": {"creationTimestamp": iso}}) == stamp
    zulu = iso.replace("+00:00", "Z")
    assert creation_timestamp({"metadata": {"creationTimestamp": zulu}}) == stamp
    moment = datetime.fromtimestamp(stamp, timezone.utc)
    assert creation_timestamp({"metadata": {"creationTimestamp": moment}}) == stamp
    assert creation_timestamp({"metadata": {}}) is None