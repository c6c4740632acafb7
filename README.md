# kubestate

`kubestate` turns the state of Kubernetes objects into Prometheus metric
families in the text exposition format. An object is a plain Python mapping
shaped like the Kubernetes API JSON, with `metadata`, `spec` and `status` keys
and camelCase field names such as `creationTimestamp` or `storageClassName`.

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install .[test]
```

The package has no runtime dependencies beyond the standard library.

## Supported kinds

Each module provides a function that returns a list of `FamilyGenerator`s for one kind:

| Kind | Function |
| --- | --- |
| LimitRange | `kubestate.limitrange.limit_range_metric_families()` |
| MutatingWebhookConfiguration | `kubestate.mutatingwebhookconfiguration.mutating_webhook_configuration_metric_families()` |
| Namespace | `kubestate.namespace.namespace_metric_families(allow_labels)` |
| NetworkPolicy | `kubestate.networkpolicy.network_policy_metric_families(allow_labels)` |
| Node | `kubestate.node.node_metric_families(allow_labels)` |
| PersistentVolume | `kubestate.persistentvolume.persistent_volume_metric_families(allow_labels)` |
| PersistentVolumeClaim | `kubestate.persistentvolumeclaim.persistent_volume_claim_metric_families(allow_labels)` |

`allow_labels` controls which Kubernetes labels appear on the `*_labels`
families. With `None` or an empty list, no object labels are exposed. If the
first entry is `"*"`, every label is exposed. Otherwise only the named labels
that the object has are exposed. Exposed labels are sorted by name and
prefixed with `label_`. Characters that are not allowed in a label name are
replaced with `_`; `kubestate.metric.sanitize_label_name` does this.

## Usage

```python
from kubestate.metric import compose_metric_gen_funcs, extract_metric_family_headers
from kubestate.namespace import namespace_metric_families

families = namespace_metric_families(None)
generate = compose_metric_gen_funcs(families)
headers = extract_metric_family_headers(families)

namespace = {
    "metadata": {"name": "default", "creationTimestamp": "2017-07-14T02:40:00Z"},
    "status": {"phase": "Active"},
}

for header, family in zip(headers, generate(namespace)):
    print(header)
    print(family.to_text(), end="")
```

The main building blocks live in `kubestate.metric`:

- `Metric` is one sample, with `label_keys`, `label_values` and `value`.
- `Family` is a named list of metrics. `Family.to_text()` renders the metrics
  as exposition lines, escaping label values. If a metric has different numbers
  of keys and values, `to_text()` raises `ValueError`.
- `FamilyGenerator` holds a family's `name`, `help_text`, `metric_type` and
  the function that builds it. `generate(obj)` returns the named `Family` for
  one object. The `header` property gives the `# HELP` and `# TYPE` lines.
- `compose_metric_gen_funcs(families)` returns a function that builds every
  family for an object, in order.
- `extract_metric_family_headers(families)` returns the header of each family.
- `format_value(value)` formats a sample value, for example `1.5e+09` or `4.3`.

Creation timestamps can be RFC 3339 strings, `datetime` objects or Unix
seconds. The `*_created` families leave out the sample when no timestamp is
set. `kube_networkpolicy_created` is an exception: it always reports a value
and uses the Unix seconds of year 1 when no timestamp is set.

### Resource quantities

Resource amounts such as `"2.1G"`, `"5Gi"` or `"250m"` use Kubernetes quantity
notation. This includes decimal suffixes (`n`, `u`, `m`, `k`, `M`, `G`, `T`,
`P`, `E`), binary suffixes (`Ki` through `Ei`) and exponents such as `1e3`:

```python
from kubestate.quantity import parse_quantity

parse_quantity("5Gi").value()        # 5368709120
parse_quantity("250m").milli_value() # 250
```

`parse_quantity` also accepts integers, finite floats and existing `Quantity`
values. It raises `InvalidQuantityError`, a subclass of `ValueError`, when the
input is not a valid quantity. `value()` and `milli_value()` round away from
zero.

## What it does not do

`kubestate` only computes metrics from objects that you pass in. It does not:

- connect to a Kubernetes cluster, or list or watch objects;
- keep a store of objects between calls;
- serve an HTTP endpoint;
- provide a command-line program.

The calling code has to fetch objects, call the generators and serve the
text.

## Running the tests

```
pytest
```