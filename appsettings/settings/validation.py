"""
Settings Validation
===================
Validate submitted settings against pipe-separated rule strings
such as ``"required|integer|min:1"``.
"""

import re
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import AnyHttpUrl, EmailStr, TypeAdapter, ValidationError

from .request import UploadedFile

IMAGE_EXTENSIONS = ("jpg", "jpeg", "png", "gif", "bmp", "svg", "webp")
NUMERIC_PATTERN = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")
INTEGER_PATTERN = re.compile(r"^\s*[+-]?\d+\s*$")

_EMAIL_ADAPTER = TypeAdapter(EmailStr)
_URL_ADAPTER = TypeAdapter(AnyHttpUrl)


class ValidationFailed(ValueError):
    """Raised when submitted settings break their rules."""

    def __init__(self, errors: Dict[str, List[str]]):
        self.errors = errors
        super().__init__("; ".join(msg for messages in errors.values() for msg in messages))


def parse_rules(rules: Union[str, List[str], None]) -> List[tuple]:
    """Split a rule expression into (name, [params]) pairs."""
    if not rules:
        return []
    if isinstance(rules, str):
        rules = rules.split("|")

    parsed = []
    for rule in rules:
        rule = rule.strip()
        if not rule:
            continue
        name, _, params = rule.partition(":")
        parsed.append((name.lower(), params.split(",") if params else []))
    return parsed


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, dict, tuple)):
        return len(value) == 0
    if isinstance(value, UploadedFile):
        return not value.is_valid()
    return False


def _is_numeric(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    return isinstance(value, str) and bool(NUMERIC_PATTERN.match(value))


def _conforms(adapter: TypeAdapter, value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        adapter.validate_python(value)
    except ValidationError:
        return False
    return True


def _size(value: Any, numeric: bool) -> float:
    """Size used by min/max/between: number, length, count or kilobytes."""
    if isinstance(value, UploadedFile):
        return value.size / 1024
    if numeric and _is_numeric(value):
        return float(value)
    if isinstance(value, (list, dict, tuple)):
        return len(value)
    return len(str(value))


class SettingsValidator:
    """Validate a mapping of submitted values against rules.

    Usage:
        validator = SettingsValidator({"max_items": "required|integer|min:1"})
        validator.validate({"max_items": "5"})
    """

    def __init__(self, rules: Dict[str, Union[str, List[str]]]):
        self.rules = {name: parse_rules(rule) for name, rule in rules.items()}
        self._checks: Dict[str, Callable[[Any, List[str], bool], Optional[str]]] = {
            "string": self._check_string,
            "integer": self._check_integer,
            "int": self._check_integer,
            "numeric": self._check_numeric,
            "boolean": self._check_boolean,
            "bool": self._check_boolean,
            "array": self._check_array,
            "email": self._check_email,
            "url": self._check_url,
            "min": self._check_min,
            "max": self._check_max,
            "between": self._check_between,
            "in": self._check_in,
            "file": self._check_file,
            "image": self._check_image,
            "mimes": self._check_mimes,
        }

    def errors(self, data: Dict[str, Any]) -> Dict[str, List[str]]:
        """Collect error messages per setting name."""
        errors: Dict[str, List[str]] = {}

        for name, rules in self.rules.items():
            value = data.get(name)
            rule_names = {rule for rule, _ in rules}
            numeric = bool(rule_names & {"integer", "int", "numeric"})
            messages = []

            if _is_empty(value):
                if "required" in rule_names:
                    messages.append(f"The {name} field is required.")
            else:
                for rule, params in rules:
                    check = self._checks.get(rule)
                    if check is None:
                        continue
                    message = check(value, params, numeric)
                    if message:
                        messages.append(message.format(name=name))

            if messages:
                errors[name] = messages

        return errors

    def validate(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Validate data and return the values that have rules.

        Raises:
            ValidationFailed: If any rule fails
        """
        errors = self.errors(data)
        if errors:
            raise ValidationFailed(errors)
        return {name: data.get(name) for name in self.rules if name in data}

    @staticmethod
    def _check_string(value, params, numeric):
        if not isinstance(value, str):
            return "The {name} must be a string."

    @staticmethod
    def _check_integer(value, params, numeric):
        if isinstance(value, bool):
            return "The {name} must be an integer."
        if isinstance(value, int):
            return None
        if not (isinstance(value, str) and INTEGER_PATTERN.match(value)):
            return "The {name} must be an integer."

    @staticmethod
    def _check_numeric(value, params, numeric):
        if not _is_numeric(value):
            return "The {name} must be a number."

    @staticmethod
    def _check_boolean(value, params, numeric):
        if value not in (True, False, 0, 1, "0", "1", "true", "false", "on", "off"):
            return "The {name} field must be true or false."

    @staticmethod
    def _check_array(value, params, numeric):
        if not isinstance(value, (list, dict)):
            return "The {name} must be an array."

    @staticmethod
    def _check_email(value, params, numeric):
        if not _conforms(_EMAIL_ADAPTER, value):
            return "The {name} must be a valid email address."

    @staticmethod
    def _check_url(value, params, numeric):
        if not _conforms(_URL_ADAPTER, value):
            return "The {name} format is invalid."

    @staticmethod
    def _check_min(value, params, numeric):
        if _size(value, numeric) < float(params[0]):
            return "The {name} must be at least " + params[0] + "."

    @staticmethod
    def _check_max(value, params, numeric):
        if _size(value, numeric) > float(params[0]):
            return "The {name} may not be greater than " + params[0] + "."

    @staticmethod
    def _check_between(value, params, numeric):
        size = _size(value, numeric)
        if not float(params[0]) <= size <= float(params[1]):
            return "The {name} must be between " + params[0] + " and " + params[1] + "."

    @staticmethod
    def _check_in(value, params, numeric):
        if str(value) not in params:
            return "The selected {name} is invalid."

    @staticmethod
    def _check_file(value, params, numeric):
        if not isinstance(value, UploadedFile):
            return "The {name} must be a file."

    @staticmethod
    def _check_image(value, params, numeric):
        if not isinstance(value, UploadedFile) or value.extension not in IMAGE_EXTENSIONS:
            return "The {name} must be an image."

    @staticmethod
    def _check_mimes(value, params, numeric):
        allowed = [p.strip().lower() for p in params]
        if not isinstance(value, UploadedFile) or value.extension not in allowed:
            return "The {name} must be a file of type: " + ", ".join(allowed) + "."
