"""Options validator: checks keyword options against a small schema.

Schema values may be:

- ``True``: the key is required (any non-``None`` value)
- a type (``str``, ``int``, ``Callable`` ...): value must be an instance
- a callable: custom check returning ``True`` or an error message
- ``(required, type_or_schema)``: optional/required wrapper around the above
- a nested ``dict`` schema, validated recursively

Example::

    validator = OptionsValidator({"ref": str, "spy": Callable}, "Observable")
    validator.validate({"ref": "app"})
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, NoReturn

from bianco.core.errors import OptionsValidatorError

SchemaValue = Any
Schema = Mapping[str, SchemaValue]

_Check = Callable[[Any, str], None]


def _type_name(type_: type) -> str:
    return getattr(type_, "__name__", repr(type_))


class OptionsValidator:
    """Validates a mapping of options against a schema built at construction."""

    def __init__(self, schema: Schema, name: str = "") -> None:
        self.name = name
        self.required_keys: list[str] = []
        self._validators: dict[str, _Check | OptionsValidator] = {}

        for key, type_ in schema.items():
            self._make_validator(key, type_)

    def _msg(self, *parts: str) -> str:
        return " ".join([self.name, *parts]).strip()

    def _throw(self, *parts: str, key: str | None = None) -> NoReturn:
        raise OptionsValidatorError(
            self._msg(*parts),
            code="invalid_option",
            details={"key": key, "validator": self.name},
        )

    def _assert_type(self, key: str, type_: type, value: Any) -> None:
        # bool is an int subclass; keep numbers and flags apart
        if value is None or not isinstance(value, type_) or (type_ is int and isinstance(value, bool)):
            self._throw(key, "must be a", _type_name(type_), key=key)

    def _custom_assertion(self, key: str, check: Callable[[Any], Any], value: Any) -> None:
        result = check(value)
        if result is True:
            return
        if isinstance(result, str) and result:
            self._throw(result, key=key)
        self._throw(key, "failed to validate and returned an empty message", key=key)

    def _leaf(self, key: str, type_: SchemaValue) -> _Check | OptionsValidator:
        """Build the check for a non-required schema value."""
        if isinstance(type_, Mapping):
            return OptionsValidator(type_)
        if isinstance(type_, type):
            return lambda value, _parent: self._assert_type(key, type_, value)
        if callable(type_):
            return lambda value, _parent: self._custom_assertion(key, type_, value)
        self._throw(key, "has an unsupported schema value", repr(type_), key=key)

    def _make_validator(self, key: str, type_: SchemaValue) -> None:
        if type_ is None:
            self._throw(key, "cannot be None when defining an options schema", key=key)

        if type_ is True:
            self.required_keys.append(key)

            def present(value: Any, _parent: str) -> None:
                if value is None:
                    self._throw(key, "must be present", key=key)

            self._validators[key] = present
            return

        if isinstance(type_, tuple):
            self._set_required(key, type_)
            return

        self._validators[key] = self._leaf(key, type_)

    def _set_required(self, key: str, opts: tuple[bool, SchemaValue]) -> None:
        required, type_ = opts
        if type_ is None:
            self._throw(key, "cannot be None when defining an options schema", key=key)
        if required:
            self.required_keys.append(key)

        inner = self._leaf(key, type_)

        def check(value: Any, parent: str) -> None:
            if value is None:
                if required:
                    self._throw(key, "is required", key=key)
                return
            if isinstance(inner, OptionsValidator):
                inner.validate(value, parent)
            else:
                inner(value, parent)

        self._validators[key] = check

    def validate(self, props: Mapping[str, Any], parent_key: str | None = None) -> None:
        """Validate ``props``; raise OptionsValidatorError on the first violation."""
        if not isinstance(props, Mapping):
            self._throw(parent_key or "options", "must be a mapping", key=parent_key)

        for key in self.required_keys:
            if key not in props:
                full_key = f"{parent_key}.{key}" if parent_key else key
                self._throw(
                    f"({full_key})",
                    "options are required:",
                    ", ".join(self.required_keys),
                    key=full_key,
                )

        for key, value in props.items():
            full_key = f"{parent_key}.{key}" if parent_key else key
            validator = self._validators.get(key)
            if validator is None:
                self._throw(full_key, "is not a valid option", key=full_key)
            elif isinstance(validator, OptionsValidator):
                validator.validate(value, full_key)
            else:
                validator(value, full_key)
