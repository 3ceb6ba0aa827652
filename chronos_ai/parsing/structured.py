"""Structured output extraction and coercion.

Models are asked for JSON but often wrap it in Markdown fences or drift
outside the closed vocabularies a feature expects. ``extract_json_candidate``
isolates the JSON text; ``parse``/``parse_object`` decode it and coerce each
declared field to its schema, substituting documented defaults instead of
failing. Only genuine JSON syntax errors raise ``MalformedResponseError``.
"""

import json
import logging
import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional

from ..exceptions import MalformedResponseError
from ..monitoring.metrics import enum_defaulted

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


def extract_json_candidate(raw: str) -> str:
    """Best-effort JSON text from model output (fenced block if present)."""
    match = _FENCE_RE.search(raw or "")
    candidate = match.group(1) if match else (raw or "")
    return candidate.strip()


class FieldKind(Enum):
    TEXT = "text"
    ENUM = "enum"
    NUMBER = "number"
    STRING_LIST = "string_list"
    PASSTHROUGH = "passthrough"


@dataclass(frozen=True)
class FieldSpec:
    kind: FieldKind
    default: Any = ""
    allowed: FrozenSet[str] = frozenset()

    @classmethod
    def text(cls, default: str = "") -> "FieldSpec":
        return cls(FieldKind.TEXT, default)

    @classmethod
    def enum(cls, allowed, default: str) -> "FieldSpec":
        return cls(FieldKind.ENUM, default, frozenset(allowed))

    @classmethod
    def number(cls, default: float = 0) -> "FieldSpec":
        return cls(FieldKind.NUMBER, default)

    @classmethod
    def string_list(cls) -> "FieldSpec":
        return cls(FieldKind.STRING_LIST, None)

    @classmethod
    def passthrough(cls, default: Any = None) -> "FieldSpec":
        return cls(FieldKind.PASSTHROUGH, default)


@dataclass(frozen=True)
class ItemSchema:
    """Shape of one structured item.

    ``root_key`` names the array inside a top-level object (``{"issues": [...]}``);
    ``None`` means the payload itself is the array.
    """

    name: str
    fields: Dict[str, FieldSpec] = field(default_factory=dict)
    root_key: Optional[str] = None


def _coerce_field(name: str, spec: FieldSpec, value: Any) -> Any:
    if spec.kind is FieldKind.ENUM:
        if isinstance(value, str) and value in spec.allowed:
            return value
        if value is not None:
            enum_defaulted.labels(field=name).inc()
            logger.debug(f"Unknown {name} value {value!r}, defaulting to {spec.default!r}")
        return spec.default

    if spec.kind is FieldKind.TEXT:
        if isinstance(value, str) and value:
            return value
        if value is not None and not isinstance(value, (str, dict, list)):
            return str(value)
        return spec.default

    if spec.kind is FieldKind.NUMBER:
        # bool is an int subclass but never a meaningful score
        if isinstance(value, (int, float)) and not isinstance(value, bool) and value and math.isfinite(value):
            return value
        return spec.default

    if spec.kind is FieldKind.STRING_LIST:
        if isinstance(value, list):
            return [str(item) for item in value if item is not None]
        return []

    return value if value is not None else spec.default


def coerce_item(data: Dict[str, Any], schema: ItemSchema) -> Dict[str, Any]:
    """Coerce declared fields; undeclared keys are dropped."""
    return {name: _coerce_field(name, spec, data.get(name)) for name, spec in schema.fields.items()}


def coerce_list(value: Any, schema: ItemSchema) -> List[Dict[str, Any]]:
    """Coerce a nested array of items; non-object entries are dropped."""
    if not isinstance(value, list):
        return []
    return [coerce_item(item, schema) for item in value if isinstance(item, dict)]


def _decode(raw: str) -> Any:
    candidate = extract_json_candidate(raw)
    try:
        return json.loads(candidate)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(f"Model returned invalid JSON: {e.msg}", excerpt=candidate)


def parse(raw: str, schema: ItemSchema) -> List[Dict[str, Any]]:
    """Parse a list of items.

    The list is returned at whatever length the model produced; count limits
    stated in prompts are advisory and not enforced here.
    """
    parsed = _decode(raw)

    if schema.root_key is not None:
        items = parsed.get(schema.root_key) if isinstance(parsed, dict) else parsed
    else:
        items = parsed

    return coerce_list(items, schema)


def parse_object(raw: str, schema: ItemSchema) -> Dict[str, Any]:
    """Parse a single top-level object."""
    parsed = _decode(raw)
    if not isinstance(parsed, dict):
        parsed = {}
    return coerce_item(parsed, schema)


def parse_json(raw: str) -> Any:
    """Decode without coercion, for free-form payloads."""
    return _decode(raw)
