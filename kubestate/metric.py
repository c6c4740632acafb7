"""Metric families, their text exposition and helpers shared by the stores."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Iterable, Mapping, Sequence

CONDITION_STATUSES = ("True", "False", "Unknown")

_INVALID_LABEL_CHARS = re.compile(r"[^a-zA-Z0-9_]")
_TRUE_WORDS = frozenset({"true", "1", "yes"})
_FALSE_WORDS = frozenset({"false", "0", "no", ""})


@dataclass
class Metric:
    """A single sample: label keys, label values and a value."""

    label_keys: list[str] = field(default_factory=list)
    label_values: list[str] = field(default_factory=list)
    value: float = 0.0


@dataclass
class Family:
    """A named group of samples."""

    name: str = ""
    metrics: list[Metric] = field(default_factory=list)

    def to_text(self) -> str:
        """Render the samples in the text exposition format."""
        return "".join(_render_metric(self.name, m) for m in self.metrics)


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace("\n", "\\n").replace('"', '\\"')


def _render_metric(name: str, metric: Metric) -> str:
    if len(metric.label_keys) != len(metric.label_values):
        raise ValueError(
            f"metric {name} has {len(metric.label_keys)} label keys "
            f"but {len(metric.label_values)} label values"
        )
    labels = ",".join(
        f'{key}="{_escape(value)}"'
        for key, value in zip(metric.label_keys, metric.label_values)
    )
    if labels:
        return f"{name}{{{labels}}} {format_value(metric.value)}\n"
    return f"{name} {format_value(metric.value)}\n"


@dataclass(frozen=True)
class FamilyGenerator:
    """Describes a metric family and builds it from an object."""

    name: str
    help_text: str
    metric_type: str
    generate_func: Callable[[Any], Family]

    def generate(self, obj: Any) -> Family:
        """Build the family for one object."""
        family = self.generate_func(obj)
        family.name = self.name
        return family

    @property
    def header(self) -> str:
        return f"# HELP {self.name} {self.help_text}\n# TYPE {self.name} {self.metric_type}"


def compose_metric_gen_funcs(
    families: Sequence[FamilyGenerator],
) -> Callable[[Any], list[Family]]:
    """Return a function that builds every family for one object, in order."""

    def generate(obj: Any) -> list[Family]:
        return [generator.generate(obj) for generator in families]

    return generate


def extract_metric_family_headers(families: Iterable[FamilyGenerator]) -> list[str]:
    """Return the HELP and TYPE header of each family."""
    return [generator.header for generator in families]


def format_value(value: float) -> str:
    """Format a sample value the way the exposition format expects."""
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"
    sign = "-" if value < 0 else ""
    parts = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(str(d) for d in parts.digits)
    exponent = len(digits) + parts.exponent - 1
    if exponent < -4 or exponent >= 6:
        mantissa = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
        exp_sign = "-" if exponent < 0 else "+"
        return f"{sign}{mantissa}e{exp_sign}{abs(exponent):02d}"
    return sign + format(Decimal(digits).scaleb(parts.exponent), "f")


def bool_float(value: Any) -> float:
    """1.0 for a true value, 0.0 otherwise.

    Missing values count as false; textual flags such as "true" or "False"
    are read by their meaning rather than by being non-empty.
    """
    if value is None:
        return 0.0
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return 1.0
        if word in _FALSE_WORDS:
            return 0.0
        raise ValueError(f"not a boolean flag: {value!r}")
    return 1.0 if value else 0.0


def condition_metrics(status: str) -> list[Metric]:
    """One metric per known condition status, set to 1 for the given status."""
    return [
        Metric(
            label_keys=["status"],
            label_values=[candidate.lower()],
            value=bool_float(status == candidate),
        )
        for candidate in CONDITION_STATUSES
    ]


def sanitize_label_name(name: str) -> str:
    """Replace every character not allowed in a label name with an underscore."""
    return _INVALID_LABEL_CHARS.sub("_", name)


def label_keys_values(
    labels: Mapping[str, str] | None, allow_labels: Sequence[str] | None
) -> tuple[list[str], list[str]]:
    """Turn allowed object labels into sorted label keys and values."""
    labels = labels or {}
    if not allow_labels:
        allowed: Mapping[str, str] = {}
    elif allow_labels[0] == "*":
        allowed = labels
    else:
        allowed = {key: labels[key] for key in allow_labels if key in labels}
    keys = sorted(allowed)
    return (
        [f"label_{sanitize_label_name(key)}" for key in keys],
        [allowed[key] for key in keys],
    )


def resource_version_metric(version: str | None) -> list[Metric]:
    """A metric holding the resource version, if it is numeric."""
    if not version or "_" in version:
        return []
    try:
        number = float(version)
    except ValueError:
        return []
    return [Metric(value=number)]


def creation_timestamp(obj: Mapping[str, Any]) -> int | None:
    """Unix seconds of the object's creation timestamp, or None if unset."""
    stamp = (obj.get("metadata") or {}).get("creationTimestamp")
    if stamp is None or stamp == "":
        return None
    if isinstance(stamp, bool):
        raise TypeError("creation timestamp must not be a boolean")
    if isinstance(stamp, (int, float)):
        return math.floor(stamp)
    if isinstance(stamp, str):
        text = stamp[:-1] + "+00:00" if stamp.endswith(("Z", "z")) else stamp
        moment = datetime.fromisoformat(text)
    elif isinstance(stamp, datetime):
        moment = stamp
    else:
        raise TypeError(f"unsupported creation timestamp: {stamp!r}")
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return math.floor(moment.timestamp())