"""A tiny interpreter for pulling values out of parsed kubectl documents.

A path program is an ordered sequence of steps evaluated left to right
against a "current value" that starts out as the root document:

* ``Key("metadata")`` looks a field up in a mapping,
* ``Index(0)`` looks an element up in a sequence,
* ``Transform(fn)`` replaces the current value with ``fn(current)``.

Missing keys and out-of-range indexes are not errors: the current value
simply becomes ``None`` (absent). Transforms still run on absent values so
that aggregations can supply their own defaults.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Sequence, Union

from KubeStatus.core.exceptions import PathExtractionError
from KubeStatus.utils.formatting import format_duration, seconds_since

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Key:
    """Mapping lookup."""

    name: str


@dataclass(frozen=True)
class Index:
    """Sequence lookup."""

    position: int


@dataclass(frozen=True)
class Transform:
    """Arbitrary computed projection of the current value."""

    func: Callable[[Any], Any] = field(compare=False)
    label: str = ""

    def __call__(self, value: Any) -> Any:
        return self.func(value)


PathStep = Union[Key, Index, Transform]
PathProgram = tuple[PathStep, ...]


def path(dotted: str = "", *transforms: Transform) -> PathProgram:
    """Builds a path program from a dotted field chain followed by transforms.

    All-digit segments become ``Index`` steps, so ``path("spec.ports.0.port")``
    reads the first port.
    """
    steps: list[PathStep] = []
    for segment in dotted.split(".") if dotted else []:
        if segment.isdigit():
            steps.append(Index(int(segment)))
        else:
            steps.append(Key(segment))
    steps.extend(transforms)
    return tuple(steps)


def extract(program: Sequence[PathStep], document: Any) -> Any:
    """Evaluates ``program`` against ``document`` and returns the final value.

    Raises PathExtractionError only when a transform itself fails.
    """
    current = document
    for step in program:
        if isinstance(step, Key):
            current = current.get(step.name) if isinstance(current, dict) else None
        elif isinstance(step, Index):
            if isinstance(current, (list, tuple)) and -len(current) <= step.position < len(current):
                current = current[step.position]
            else:
                current = None
        elif isinstance(step, Transform):
            try:
                current = step(current)
            except Exception as e:
                raise PathExtractionError(
                    f"Transform '{step.label or step.func.__name__}' failed: {e}"
                ) from e
        else:
            raise TypeError(f"Unknown path step: {step!r}")
    return current


# --- Built-in transforms ---
# Each factory returns a Transform ready to be appended to a path program.


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def address_of_type(address_type: str) -> Transform:
    """First ``address`` whose ``type`` equals ``address_type``, else absent."""

    def _lookup(addresses: Any) -> Any:
        for entry in _as_list(addresses):
            if isinstance(entry, dict) and entry.get("type") == address_type:
                return entry.get("address")
        return None

    return Transform(_lookup, f"address_of_type({address_type})")


def _restart_count(statuses: Any) -> str:
    total = 0
    for status in _as_list(statuses):
        if isinstance(status, dict):
            total += int(status.get("restartCount") or 0)
    return str(total)


restart_count = Transform(_restart_count, "restart_count")


def _human_age(timestamp: Any) -> str | None:
    elapsed = seconds_since(timestamp)
    if elapsed is None:
        return None
    return format_duration(elapsed)


human_age = Transform(_human_age, "human_age")


def _ready_count(statuses: Any) -> str:
    items = [s for s in _as_list(statuses) if isinstance(s, dict)]
    ready = sum(1 for s in items if s.get("ready"))
    return f"{ready}/{len(items)}"


ready_count = Transform(_ready_count, "ready_count")


def _port_summary(ports: Any) -> str:
    parts = []
    for port in _as_list(ports):
        if not isinstance(port, dict):
            continue
        protocol = port.get("protocol", "TCP")
        if port.get("nodePort"):
            parts.append(f"{port.get('port')}:{port.get('nodePort')}/{protocol}")
        else:
            parts.append(f"{port.get('port')}/{protocol}")
    return ",".join(parts)


port_summary = Transform(_port_summary, "port_summary")


def join(separator: str = ",") -> Transform:
    """Joins a sequence of scalars into a single string."""

    def _join(values: Any) -> Any:
        if values is None:
            return None
        if not isinstance(values, (list, tuple)):
            return str(values)
        return separator.join(str(v) for v in values)

    return Transform(_join, f"join({separator!r})")


def pluck(field_name: str) -> Transform:
    """Projects ``field_name`` out of every mapping in a sequence."""

    def _pluck(values: Any) -> list[Any]:
        return [
            v.get(field_name)
            for v in _as_list(values)
            if isinstance(v, dict) and v.get(field_name) is not None
        ]

    return Transform(_pluck, f"pluck({field_name})")


def _count(values: Any) -> str:
    if isinstance(values, (list, tuple, dict)):
        return str(len(values))
    return "0"


count = Transform(_count, "count")
key_count = Transform(_count, "key_count")


def condition_status(condition_type: str) -> Transform:
    """``status`` of the first condition with the given ``type``."""

    def _condition(conditions: Any) -> Any:
        for condition in _as_list(conditions):
            if isinstance(condition, dict) and condition.get("type") == condition_type:
                return condition.get("status")
        return None

    return Transform(_condition, f"condition_status({condition_type})")


def default(fallback: Any) -> Transform:
    """Replaces an absent or empty value with ``fallback``."""

    def _default(value: Any) -> Any:
        return fallback if value in (None, "", [], {}) else value

    return Transform(_default, f"default({fallback!r})")


def first_present(*programs: Iterable[PathStep]) -> Transform:
    """Evaluates each program against the current value, returning the first non-absent result."""
    compiled = [tuple(p) for p in programs]

    def _first(value: Any) -> Any:
        for program in compiled:
            result = extract(program, value)
            if result not in (None, ""):
                return result
        return None

    return Transform(_first, "first_present")
