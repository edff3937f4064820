"""Turning raw, possibly broken user input into safe calculator arguments.

Three rules cooperate here:

* the *clamp rule* snaps a value to its field's step and bounds, falling
  back to the field default whenever the input is not a finite number;
* the *focus/blur rule*, a two-state machine (:class:`FieldState`) that
  shows raw text while a field is being edited and formatted text
  otherwise, updating the stored value optimistically on each keystroke
  and settling it on blur;
* the *mirror rule* for one quantity that can be entered either as a
  percentage of some total or as an amount (:class:`MirroredQuantity`).

Transition functions are pure: they take a state and return a new one
together with the value to store, if any.
"""

from __future__ import annotations

import enum
import logging
import math
import numbers
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Callable, NamedTuple, Optional, Union

from .formatting import (
    format_fixed,
    format_grouped,
    format_raw,
    format_to_integer,
    parse_leading_float,
)
from .rounding import round_half_up

logger = logging.getLogger(__name__)

# A blur only reports a value when the settled value is further than this
# from what was typed or from what is currently stored.
EPSILON = 0.001


class Empty(enum.Enum):
    """Marker for a field the user cleared; never the same thing as zero."""

    EMPTY = "empty"

    def __repr__(self) -> str:
        return "EMPTY"

    def __bool__(self) -> bool:
        return False


EMPTY = Empty.EMPTY

FieldValue = Union[float, Empty]


def is_finite_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(value)


def round_to_step(value: float, step: float) -> float:
    """Snap ``value`` to the nearest multiple of ``step`` (halves go up)."""
    if step <= 0:
        return float(value)
    snapped = round_half_up(value / step) * step
    # Strip binary noise such as 0.30000000000000004 off the snapped value.
    return round(snapped, _step_decimals(step))


def _step_decimals(step: float) -> int:
    exponent = Decimal(str(step)).normalize().as_tuple().exponent
    return max(0, -int(exponent))


def clamp(
    raw: object,
    minimum: float,
    maximum: float,
    step: float = 0,
    default: Optional[float] = None,
) -> float:
    """Bound ``raw`` to ``[minimum, maximum]`` on the ``step`` grid.

    Anything that is not a finite number (``NaN``, infinities, ``EMPTY``,
    ``None``, text) is replaced by ``default`` first. Without a usable
    default the lower bound is returned, so the result is always in range.
    """
    if not is_finite_number(raw):
        if not is_finite_number(default):
            return float(minimum)
        raw = default
    margin = abs(step)
    # Pre-bounding keeps value / step finite for huge inputs.
    bounded = max(minimum - margin, min(maximum + margin, float(raw)))
    return float(max(minimum, min(maximum, round_to_step(bounded, step))))


def parse_number(text: str) -> FieldValue:
    """Parse lenient text such as ``"1,250.5"``; unreadable text is ``EMPTY``."""
    if text is None or not text.strip():
        return EMPTY
    parsed = parse_leading_float(text)
    return EMPTY if parsed is None else parsed


class NumberKind(enum.Enum):
    NORMAL = "normal"
    CURRENCY = "currency"
    PERCENTAGE = "percentage"
    INTEGER = "integer"
    YEARS = "years"


@dataclass(frozen=True)
class ClampedNumericField:
    """Reconciliation policy for one kind of numeric input."""

    name: str
    minimum: float
    maximum: float
    step: float
    default: float
    kind: NumberKind = NumberKind.NORMAL

    def clamp(self, raw: object) -> float:
        return clamp(raw, self.minimum, self.maximum, self.step, self.default)

    def accepts(self, value: object) -> bool:
        """Whether a mid-edit value may be stored without waiting for blur."""
        return is_finite_number(value) and self.minimum <= value <= self.maximum

    def parse(self, text: str) -> FieldValue:
        return parse_number(text)

    def format(self, value: float) -> str:
        if self.kind is NumberKind.CURRENCY:
            return format_grouped(value)
        if self.kind is NumberKind.PERCENTAGE:
            return format_fixed(value, 2)
        if self.kind is NumberKind.INTEGER:
            return format_to_integer(value)
        if self.kind is NumberKind.YEARS:
            return format_raw(value) if float(value).is_integer() else format_fixed(value, 1)
        return format_raw(value)

    def raw_text(self, value: float) -> str:
        return format_raw(value)


class FieldMode(enum.Enum):
    UNFOCUSED = "unfocused"
    FOCUSED = "focused"


@dataclass(frozen=True)
class FieldState:
    mode: FieldMode
    raw_text: str
    committed_value: float

    @property
    def focused(self) -> bool:
        return self.mode is FieldMode.FOCUSED


class Transition(NamedTuple):
    state: FieldState
    # The value to store, or None when nothing needs to be reported.
    emitted: Optional[float]


def initial_state(field: ClampedNumericField, value: object) -> FieldState:
    committed = field.clamp(value)
    return FieldState(FieldMode.UNFOCUSED, field.format(committed), committed)


def display_text(field: ClampedNumericField, state: FieldState) -> str:
    if state.focused:
        return state.raw_text
    return field.format(state.committed_value)


def focus(field: ClampedNumericField, state: FieldState) -> FieldState:
    if state.focused:
        return state
    return FieldState(
        FieldMode.FOCUSED, field.raw_text(state.committed_value), state.committed_value
    )


def edit(field: ClampedNumericField, state: FieldState, text: str) -> Transition:
    """Apply one keystroke's worth of text.

    In-range numbers are stored right away; anything else (``"-"``, ``"."``,
    out-of-range values) is kept verbatim as text and waits for blur.
    """
    parsed = field.parse(text)
    if field.accepts(parsed):
        committed = field.clamp(parsed)
        return Transition(FieldState(FieldMode.FOCUSED, text, committed), committed)
    logger.debug("%s: holding %r until blur", field.name, text)
    return Transition(FieldState(FieldMode.FOCUSED, text, state.committed_value), None)


def blur(field: ClampedNumericField, state: FieldState) -> Transition:
    """Settle the typed text into a clamped value and reformat it."""
    if not state.focused:
        return Transition(state, None)
    typed = field.parse(state.raw_text)
    final = field.clamp(typed)
    settled = FieldState(FieldMode.UNFOCUSED, field.format(final), final)
    if (
        typed is EMPTY
        or abs(final - typed) > EPSILON
        or abs(final - state.committed_value) > EPSILON
    ):
        logger.debug("%s: %r settled to %s", field.name, state.raw_text, final)
        return Transition(settled, final)
    return Transition(settled, None)


def slide(field: ClampedNumericField, state: FieldState, raw: object) -> Transition:
    """A slider move; the paired text input follows unless it is being edited."""
    if not is_finite_number(raw):
        return Transition(state, None)
    return Transition(sync(field, state, raw), field.clamp(raw))


def sync(field: ClampedNumericField, state: FieldState, value: object) -> FieldState:
    """Reflect a value stored elsewhere without disturbing text being typed."""
    committed = field.clamp(value)
    if state.focused:
        return replace(state, committed_value=committed)
    return FieldState(FieldMode.UNFOCUSED, field.format(committed), committed)


class Representation(enum.Enum):
    PERCENTAGE = "percentage"
    AMOUNT = "amount"


TotalSource = Union[None, float, Callable[[], Optional[float]]]


def _resolve_total(total: TotalSource) -> Optional[float]:
    value = total() if callable(total) else total
    if is_finite_number(value) and value > 0:
        return float(value)
    return None


def percentage_to_amount(percentage: float, total: TotalSource) -> Optional[float]:
    resolved = _resolve_total(total)
    if resolved is None:
        return None
    return percentage / 100.0 * resolved


def amount_to_percentage(amount: float, total: TotalSource) -> Optional[float]:
    resolved = _resolve_total(total)
    if resolved is None:
        return None
    return amount / resolved * 100.0


@dataclass(frozen=True)
class MirroredQuantity:
    """One quantity entered either as a percentage of a total or as an amount.

    ``value`` is the only source of truth. ``inactive_value`` is whatever the
    other representation last showed; it is not kept in sync and is only
    brought back when switching while the total is unknown.
    """

    representation: Representation
    value: float
    inactive_value: float = 0.0

    def with_value(self, value: float) -> "MirroredQuantity":
        return replace(self, value=value)

    def as_percentage(self, total: TotalSource) -> Optional[float]:
        if self.representation is Representation.PERCENTAGE:
            return self.value
        return amount_to_percentage(self.value, total)

    def as_amount(self, total: TotalSource) -> Optional[float]:
        if self.representation is Representation.AMOUNT:
            return self.value
        return percentage_to_amount(self.value, total)

    def switch(
        self,
        representation: Representation,
        total: TotalSource,
        field: Optional[ClampedNumericField] = None,
    ) -> "MirroredQuantity":
        """Change the active representation, converting through ``total``.

        With no positive total nothing is recalculated: the previously
        stored value of the newly active representation comes back as is.
        ``field`` optionally clamps the converted value to its policy.
        """
        if representation is self.representation:
            return self
        if self.representation is Representation.PERCENTAGE:
            converted = percentage_to_amount(self.value, total)
        else:
            converted = amount_to_percentage(self.value, total)
        if converted is None:
            logger.debug("no usable total, restoring stored %s", representation.value)
            return MirroredQuantity(representation, self.inactive_value, self.value)
        if field is not None:
            converted = field.clamp(converted)
        return MirroredQuantity(representation, converted, self.value)
