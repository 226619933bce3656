"""Format rule operations applied to a single cell value.

Each operation receives the running value and the rule's string parameter and
returns the next value. Operations never raise: an unknown tag, a parameter that
does not parse, or a value that cannot be interpreted leaves the value as it was.
Absent values (``None``) pass through every operation untouched.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from tabrecon.domain.model import RuleOperation, as_text, parse_number

if TYPE_CHECKING:
    from collections.abc import Iterable

    from tabrecon.domain.model import FormatRule, Scalar

log = logging.getLogger(__name__)

type RuleFn = Callable[[str | float | bool, str], Scalar]

_BRACKET_PATTERN = re.compile(r"\[(.+?)\]")
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def _parse_count(parameter: str) -> int | None:
    try:
        count = int(parameter.strip())
    except ValueError:
        return None
    return count if count >= 0 else None


def _text(value: str | float | bool) -> str:
    text = as_text(value)
    return "" if text is None else text


def _del_pre(value: str | float | bool, parameter: str) -> Scalar:
    count = _parse_count(parameter)
    if count is None:
        return value
    return _text(value)[count:]


def _del_after(value: str | float | bool, parameter: str) -> Scalar:
    count = _parse_count(parameter)
    if count is None:
        return value
    return _text(value)[:count]


def _del_char(value: str | float | bool, parameter: str) -> Scalar:
    if not parameter:
        return value
    return _text(value).replace(parameter, "")


def _replace_two_char(value: str | float | bool, parameter: str) -> Scalar:
    parts = parameter.split(",")
    if len(parts) != 2 or not parts[0]:
        return value
    old, new = parts
    return _text(value).replace(old, new)


def _bracket_value(value: str | float | bool, _parameter: str) -> Scalar:
    found = _BRACKET_PATTERN.search(_text(value))
    return found.group(1) if found else ""


def _divide_number(value: str | float | bool, parameter: str) -> Scalar:
    divisor = parse_number(parameter)
    number = parse_number(value)
    if divisor is None or divisor == 0 or number is None:
        return value
    return number / divisor


def _abs_value(value: str | float | bool, _parameter: str) -> Scalar:
    number = parse_number(value)
    if number is None:
        return value
    return abs(number)


def _add_char_pre(value: str | float | bool, parameter: str) -> Scalar:
    return parameter + _text(value)


def _add_char_after(value: str | float | bool, parameter: str) -> Scalar:
    return _text(value) + parameter


def _xendit_time(value: str | float | bool, _parameter: str) -> Scalar:
    if not isinstance(value, str):
        return value
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return value
    return parsed.strftime(TIMESTAMP_FORMAT)


RULES: dict[str, RuleFn] = {
    RuleOperation.DEL_PRE: _del_pre,
    RuleOperation.DEL_AFTER: _del_after,
    RuleOperation.DEL_CHAR: _del_char,
    RuleOperation.REPLACE_TWO_CHAR: _replace_two_char,
    RuleOperation.BRA_VALUE: _bracket_value,
    RuleOperation.DIVIDE_NUMBER: _divide_number,
    RuleOperation.ABS_VALUE: _abs_value,
    RuleOperation.ADD_CHAR_PRE: _add_char_pre,
    RuleOperation.ADD_CHAR_AFTER: _add_char_after,
    RuleOperation.XENDIT_TIME: _xendit_time,
}


def apply_rule(value: Scalar, rule: FormatRule) -> Scalar:
    """Apply one rule; unknown operations are identity."""

    if value is None:
        return None
    handler = RULES.get(rule.operation)
    if handler is None:
        log.debug("Ignoring unknown format rule operation %r", rule.operation)
        return value
    return handler(value, rule.value)


def apply_rules(value: Scalar, rules: Iterable[FormatRule]) -> Scalar:
    """Apply ``rules`` strictly in order, each consuming the previous output."""

    for rule in rules:
        value = apply_rule(value, rule)
    return value
