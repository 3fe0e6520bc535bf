"""Simple metrics library using only the Python standard library.

This module provides counters and gauges similar to Prometheus, without
any external dependencies.  Metrics are collected in global objects and
can be exported in the Prometheus text exposition format.
"""

from collections import defaultdict
from threading import Lock
from typing import Dict, Iterable, List, Tuple


def _escape_label(value: str) -> str:
    """Escape a label value per the Prometheus text format."""
    return str(value).replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


class Metric:
    """Base class for all metrics."""

    def __init__(self, name: str, description: str, label_names: Iterable[str]):
        self.name = name
        self.description = description
        self.label_names = list(label_names)
        # Protect metric updates in multi‑threaded contexts
        self._lock = Lock()
        self._values: Dict[Tuple[str, ...], float] = defaultdict(float)
        # register metric in global registry
        _METRIC_REGISTRY.append(self)

    def _label_tuple(self, labels: Dict[str, str]) -> Tuple[str, ...]:
        return tuple(labels.get(k, "") for k in self.label_names)

    def _format_labels(self, label_values: Tuple[str, ...]) -> str:
        if not self.label_names:
            return ""
        pairs = [f'{name}="{_escape_label(value)}"' for name, value in zip(self.label_names, label_values)]
        return "{" + ",".join(pairs) + "}"

    def get(self, **labels: str) -> float:
        """Return the current value for the given labels (0 if never set)."""
        with self._lock:
            return self._values.get(self._label_tuple(labels), 0.0)

    def _kind(self) -> str:
        raise NotImplementedError

    def to_prometheus(self) -> List[str]:
        """Return a list of strings in Prometheus exposition format."""
        lines = [f"# HELP {self.name} {self.description}", f"# TYPE {self.name} {self._kind()}"]
        with self._lock:
            for label_values, value in self._values.items():
                label_str = self._format_labels(label_values)
                lines.append(f"{self.name}{label_str} {value}")
        return lines


class Counter(Metric):
    """Monotonic counter.  Call ``inc()`` to increment by 1 or by an amount.

    The ``inc`` method accepts keyword arguments matching the label
    names provided at construction time.  Example:

    ``VEND_TOTAL.inc(selection="Soda", outcome="success")``
    """

    def inc(self, amount: float = 1.0, **labels: str) -> None:
        if amount < 0:
            raise ValueError("Counters can only increase")
        with self._lock:
            self._values[self._label_tuple(labels)] += amount

    def _kind(self) -> str:
        return "counter"


class Gauge(Metric):
    """Gauge metric representing a single numeric value or labeled values.

    Use ``set()`` to assign a value.  Gauges may go up or down.
    """

    def set(self, value: float, **labels: str) -> None:
        with self._lock:
            self._values[self._label_tuple(labels)] = float(value)

    def _kind(self) -> str:
        return "gauge"


_METRIC_REGISTRY: List[Metric] = []


def generate_metrics_text() -> bytes:
    """Generate the text representation of all registered metrics."""
    lines: List[str] = []
    for metric in _METRIC_REGISTRY:
        lines.extend(metric.to_prometheus())
    return "\n".join(lines).encode("utf-8")


# -----------------------------------------------------------------------------
# Global metrics used by the vending application (see app.py).
# -----------------------------------------------------------------------------

# Vend attempts, labelled by selection and outcome (success or the error kind)
VEND_TOTAL = Counter(
    name="vend_total",
    description="Total number of vend attempts, labelled by selection and outcome",
    label_names=["selection", "outcome"],
)

# Accepted deposits
DEPOSIT_TOTAL = Counter(
    name="deposit_total",
    description="Total number of accepted deposits",
    label_names=[],
)

# Sum of all accepted deposit amounts
DEPOSITED_AMOUNT_TOTAL = Counter(
    name="deposited_amount_total",
    description="Total amount deposited",
    label_names=[],
)

# Current balance of the machine
BALANCE_AMOUNT = Gauge(
    name="balance_amount",
    description="Amount deposited and not yet spent",
    label_names=[],
)
