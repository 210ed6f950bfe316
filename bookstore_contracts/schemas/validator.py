# bookstore_contracts/schemas/validator.py
"""
Structural validation of JSON response bodies with jsonschema.

Schemas are written as small node trees and compiled to JSON Schema
(draft 7) documents:

    BOOK = Object({
        "isbn": String(min_length=5),
        "pages": Integer(minimum=0),
        "subTitle": OptionalField(String()),
    }, name="Book")

`validate` runs `Draft7Validator.iter_errors` and turns every reported
error into a FieldError, so a failing response reports all of its problems
at once instead of stopping at the first one.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

from jsonschema import Draft7Validator
from jsonschema.exceptions import ValidationError as SchemaError

from ..exceptions import ValidationError


class ErrorKind(Enum):
    MISSING_FIELD = "missing field"
    WRONG_TYPE = "wrong type"
    CONSTRAINT = "constraint"


@dataclass(frozen=True)
class FieldError:
    path: str
    kind: ErrorKind
    message: str

    def __str__(self) -> str:
        return f"{self.path or '<root>'}: {self.kind.value}: {self.message}"


# ===== Schema nodes =====

@dataclass(frozen=True)
class String:
    min_length: Optional[int] = None

    def to_json_schema(self) -> Dict[str, Any]:
        schema: Dict[str, Any] = {"type": "string"}
        if self.min_length is not None:
            schema["minLength"] = self.min_length
        return schema


@dataclass(frozen=True)
class Integer:
    minimum: Optional[int] = None

    def to_json_schema(self) -> Dict[str, Any]:
        schema: Dict[str, Any] = {"type": "integer"}
        if self.minimum is not None:
            schema["minimum"] = self.minimum
        return schema


@dataclass(frozen=True)
class Number:
    minimum: Optional[float] = None

    def to_json_schema(self) -> Dict[str, Any]:
        schema: Dict[str, Any] = {"type": "number"}
        if self.minimum is not None:
            schema["minimum"] = self.minimum
        return schema


@dataclass(frozen=True)
class Boolean:
    def to_json_schema(self) -> Dict[str, Any]:
        return {"type": "boolean"}


@dataclass(frozen=True)
class Array:
    items: "SchemaNode"
    min_items: Optional[int] = None

    def to_json_schema(self) -> Dict[str, Any]:
        schema: Dict[str, Any] = {"type": "array"}
        if self.min_items is not None:
            schema["minItems"] = self.min_items
        schema["items"] = compile_schema(self.items)
        return schema


@dataclass(frozen=True)
class Object:
    fields: Dict[str, "SchemaNode"] = field(default_factory=dict)
    name: Optional[str] = None

    def to_json_schema(self) -> Dict[str, Any]:
        schema: Dict[str, Any] = {"type": "object"}
        if self.name:
            schema["title"] = self.name
        required = [key for key, node in self.fields.items() if not isinstance(node, OptionalField)]
        if required:
            # Listed before properties so missing keys are reported first
            schema["required"] = required
        schema["properties"] = {key: compile_schema(node) for key, node in self.fields.items()}
        return schema


@dataclass(frozen=True)
class OptionalField:
    """The key may be absent; when present it must match `inner`"""
    inner: "SchemaNode"

    def to_json_schema(self) -> Dict[str, Any]:
        return compile_schema(self.inner)


@dataclass(frozen=True)
class Nullable:
    """The value may be JSON null; otherwise it must match `inner`"""
    inner: "SchemaNode"

    def to_json_schema(self) -> Dict[str, Any]:
        schema = dict(compile_schema(self.inner))
        types = schema["type"] if isinstance(schema["type"], list) else [schema["type"]]
        schema["type"] = types + ["null"]
        return schema


SchemaNode = Union[String, Integer, Number, Boolean, Array, Object, OptionalField, Nullable]

Schema = Union[SchemaNode, Dict[str, Any]]

_NODE_TYPES = (String, Integer, Number, Boolean, Array, Object, OptionalField, Nullable)


def compile_schema(schema: Schema) -> Dict[str, Any]:
    """JSON Schema document for a node tree; documents pass through unchanged"""
    if isinstance(schema, dict):
        return schema
    if isinstance(schema, _NODE_TYPES):
        return schema.to_json_schema()
    raise TypeError(f"Not a schema: {schema!r}")


@dataclass
class ValidationResult:
    value: Any
    errors: List[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def first_error(self) -> Optional[FieldError]:
        return self.errors[0] if self.errors else None

    def raise_for_errors(self, operation: str = "") -> Any:
        if self.errors:
            raise ValidationError(self.errors, operation=operation, body=self.value)
        return self.value


def validate(schema: Schema, value: Any) -> ValidationResult:
    """Check `value` against `schema`, collecting all field mismatches"""
    validator = Draft7Validator(compile_schema(schema))
    errors = list(_field_errors(validator.iter_errors(value)))
    return ValidationResult(value=value, errors=errors)


def validate_or_raise(schema: Schema, value: Any, operation: str = "") -> Any:
    return validate(schema, value).raise_for_errors(operation)


# ===== jsonschema error mapping =====

def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    return type(value).__name__


def _format_path(parts: Iterable[Any]) -> str:
    """books[2].pages style path from a jsonschema absolute path"""
    path = ""
    for part in parts:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path = f"{path}.{part}" if path else str(part)
    return path


def _field_errors(errors: Iterable[SchemaError]) -> Iterator[FieldError]:
    # `required` yields one error per absent key, in the order the keys are listed
    missing: Dict[str, Iterator[str]] = {}

    for error in errors:
        path = _format_path(error.absolute_path)

        if error.validator == "required":
            if path not in missing:
                missing[path] = iter([key for key in error.validator_value if key not in error.instance])
            key = next(missing[path])
            yield FieldError(_format_path([*error.absolute_path, key]), ErrorKind.MISSING_FIELD, "required field is absent")

        elif error.validator == "type":
            types = error.validator_value if isinstance(error.validator_value, list) else [error.validator_value]
            expected = error.schema.get("title") or " or ".join(types)
            yield FieldError(path, ErrorKind.WRONG_TYPE, f"expected {expected}, got {_type_name(error.instance)}")

        elif error.validator == "minLength":
            yield FieldError(
                path, ErrorKind.CONSTRAINT,
                f"length {len(error.instance)} is below minimum {error.validator_value}"
            )

        elif error.validator == "minItems":
            yield FieldError(
                path, ErrorKind.CONSTRAINT,
                f"{len(error.instance)} items is below minimum {error.validator_value}"
            )

        elif error.validator == "minimum":
            yield FieldError(path, ErrorKind.CONSTRAINT, f"{error.instance} is below minimum {error.validator_value}")

        else:
            yield FieldError(path, ErrorKind.CONSTRAINT, error.message)
