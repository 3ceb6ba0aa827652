from .structured import (
    FieldKind,
    FieldSpec,
    ItemSchema,
    coerce_item,
    coerce_list,
    extract_json_candidate,
    parse,
    parse_json,
    parse_object,
)

__all__ = [
    "FieldKind",
    "FieldSpec",
    "ItemSchema",
    "coerce_item",
    "coerce_list",
    "extract_json_candidate",
    "parse",
    "parse_json",
    "parse_object",
]
