"""Band, linear and logarithmic scales for chart projection.

The scales follow the conventions of d3-scale so that charts keep the tick
values and spacing users already know from the web charts: linear domains are
"niced" to round tick steps, log domains to whole powers of ten, and band
scales split a pixel range into evenly padded categories.
"""

import math
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal
from typing import Generic, TypeVar

K = TypeVar("K")

_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)

SI_PREFIXES = (
    "y", "z", "a", "f", "p", "n", "µ", "m", "", "k", "M", "G", "T", "P", "E", "Z", "Y"
)


def _round(value: float) -> int:
    # Half-up rounding, matching the tick arithmetic of the web charts
    return math.floor(value + 0.5)


def _tick_spec(start: float, stop: float, count: float) -> tuple[int, int, float]:
    step = (stop - start) / max(0.0, count)
    power = math.floor(math.log10(step))
    error = step / math.pow(10, power)
    factor = 10 if error >= _E10 else 5 if error >= _E5 else 2 if error >= _E2 else 1
    if power < 0:
        inc = math.pow(10, -power) / factor
        i1 = _round(start * inc)
        i2 = _round(stop * inc)
        if i1 / inc < start:
            i1 += 1
        if i2 / inc > stop:
            i2 -= 1
        inc = -inc
    else:
        inc = math.pow(10, power) * factor
        i1 = _round(start / inc)
        i2 = _round(stop / inc)
        if i1 * inc < start:
            i1 += 1
        if i2 * inc > stop:
            i2 -= 1
    if i2 < i1 and 0.5 <= count < 2:
        return _tick_spec(start, stop, count * 2)
    return i1, i2, inc


def tick_increment(start: float, stop: float, count: float) -> float:
    """Tick step for ``[start, stop]``; negative values encode ``1 / -step``."""
    return _tick_spec(start, stop, count)[2]


def tick_step(start: float, stop: float, count: float) -> float:
    """Plain tick step between ``start`` and ``stop``."""
    reverse = stop < start
    inc = tick_increment(stop, start, count) if reverse else tick_increment(start, stop, count)
    step = 1 / -inc if inc < 0 else inc
    return -step if reverse else step


def ticks(start: float, stop: float, count: float) -> list[float]:
    """Roughly ``count`` evenly spaced round values within ``[start, stop]``."""
    if not count > 0:
        return []
    if start == stop:
        return [start]
    reverse = stop < start
    i1, i2, inc = _tick_spec(stop, start, count) if reverse else _tick_spec(start, stop, count)
    if not i2 >= i1:
        return []
    values = [(i1 + i) / -inc if inc < 0 else (i1 + i) * inc for i in range(i2 - i1 + 1)]
    return values[::-1] if reverse else values


def _exponent(value: float) -> int:
    return int(f"{abs(value):e}".split("e")[1])


def to_fixed(value: float, digits: int) -> str:
    """Fixed-point text with exact halves rounded away from zero.

    Matches the number labels of the web charts, where 12.25 reads "12.3".
    """
    quantum = Decimal(1).scaleb(-digits)
    return format(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP), "f")


def format_fixed(value: float, step: float) -> str:
    """Format a linear tick with just enough decimals for ``step``."""
    precision = max(0, -_exponent(step)) if step else 0
    return f"{value:,.{precision}f}"


def format_si(value: float, significant: int = 6) -> str:
    """Format ``value`` with an SI prefix, trimming insignificant zeros."""
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    mantissa, exponent_text = f"{abs(value):.{significant - 1}e}".split("e")
    exponent = int(exponent_text)
    digits = mantissa.replace(".", "")
    prefix_exponent = max(-8, min(8, math.floor(exponent / 3))) * 3
    point = exponent - prefix_exponent + 1
    if point == len(digits):
        text = digits
    elif point > len(digits):
        text = digits + "0" * (point - len(digits))
    elif point > 0:
        text = f"{digits[:point]}.{digits[point:]}"
    else:
        text = "0." + "0" * -point + digits
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"{sign}{text}{SI_PREFIXES[8 + prefix_exponent // 3]}"


def _interpolate(a: float, b: float, t: float) -> float:
    return a * (1 - t) + b * t


class LinearScale:
    """Affine map from a numeric domain to a pixel range."""

    def __init__(self, domain: tuple[float, float], range_: tuple[float, float]):
        self.domain = (float(domain[0]), float(domain[1]))
        self.range = (float(range_[0]), float(range_[1]))

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        span = d1 - d0
        t = (value - d0) / span if span else 0.5
        return _interpolate(self.range[0], self.range[1], t)

    def nice(self, count: int = 10) -> "LinearScale":
        """Extend the domain outward to round multiples of the tick step."""
        start, stop = self.domain
        reverse = stop < start
        if reverse:
            start, stop = stop, start
        previous_step = None
        for _ in range(10):
            step = tick_increment(start, stop, count)
            if step == previous_step:
                break
            if step > 0:
                start = math.floor(start / step) * step
                stop = math.ceil(stop / step) * step
            elif step < 0:
                start = math.ceil(start * step) / step
                stop = math.floor(stop * step) / step
            else:
                break
            previous_step = step
        self.domain = (stop, start) if reverse else (start, stop)
        return self

    def ticks(self, count: int = 10) -> list[float]:
        return ticks(self.domain[0], self.domain[1], count)

    def tick_format(self, count: int = 10):
        """Formatter matching the precision of ``ticks(count)``."""
        step = tick_step(self.domain[0], self.domain[1], count)
        return lambda value: format_fixed(value, step)


class LogScale:
    """Base-10 logarithmic map from a strictly positive domain to a pixel range."""

    def __init__(self, domain: tuple[float, float], range_: tuple[float, float]):
        if domain[0] <= 0 or domain[1] <= 0:
            raise ValueError(f"Log scale domain must be positive, got {domain}")
        self.domain = (float(domain[0]), float(domain[1]))
        self.range = (float(range_[0]), float(range_[1]))

    @staticmethod
    def _pow10(exponent: float) -> float:
        # Exact powers of ten, as "1e-1" parses to the nearest double of 0.1
        if float(exponent).is_integer():
            return float(f"1e{int(exponent)}")
        return math.pow(10, exponent)

    def __call__(self, value: float) -> float:
        lo, hi = (math.log10(bound) for bound in self.domain)
        span = hi - lo
        t = (math.log10(value) - lo) / span if span else 0.5
        return _interpolate(self.range[0], self.range[1], t)

    def nice(self) -> "LogScale":
        """Round the domain outward to whole powers of ten."""
        d0, d1 = self.domain
        reverse = d1 < d0
        if reverse:
            d0, d1 = d1, d0
        d0 = self._pow10(math.floor(math.log10(d0)))
        d1 = self._pow10(math.ceil(math.log10(d1)))
        self.domain = (d1, d0) if reverse else (d0, d1)
        return self

    def ticks(self, count: int = 10) -> list[float]:
        """Tick values: 1-9 multiples per decade when few decades are spanned."""
        u, v = self.domain
        reverse = v < u
        if reverse:
            u, v = v, u
        i = math.log10(u)
        j = math.log10(v)
        if j - i < count:
            values: list[float] = []
            for power in range(math.floor(i), math.ceil(j) + 1):
                for k in range(1, 10):
                    value = k / self._pow10(-power) if power < 0 else k * self._pow10(power)
                    if value < u:
                        continue
                    if value > v:
                        break
                    values.append(value)
            if len(values) * 2 < count:
                values = ticks(u, v, count)
        else:
            values = [self._pow10(e) for e in ticks(i, j, min(j - i, count))]
        return values[::-1] if reverse else values

    def tick_format(self, count: int = 10):
        """SI formatter that blanks intermediate ticks when a decade is crowded."""
        threshold = max(1.0, 10 * count / max(1, len(self.ticks())))

        def formatter(value: float) -> str:
            mantissa = value / self._pow10(_round(math.log10(value)))
            if mantissa * 10 < 10 - 0.5:
                mantissa *= 10
            return format_si(value) if mantissa <= threshold else ""

        return formatter


class BandScale(Generic[K]):
    """Evenly spaced bands for an ordered set of categories."""

    def __init__(self, domain: Sequence[K], range_: tuple[float, float], padding: float = 0.0):
        self.domain = list(domain)
        self.range = (float(range_[0]), float(range_[1]))
        self.padding = padding
        start, stop = self.range
        n = len(self.domain)
        self.step = (stop - start) / max(1, n - padding + padding * 2)
        self.start = start + (stop - start - self.step * (n - padding)) * 0.5
        self.bandwidth = self.step * (1 - padding)
        self._index = {key: index for index, key in enumerate(self.domain)}

    def __call__(self, key: K) -> float | None:
        index = self._index.get(key)
        if index is None:
            return None
        return self.start + self.step * index

    def center(self, key: K) -> float:
        """Pixel position of the middle of ``key``'s band."""
        return (self(key) or 0.0) + self.bandwidth / 2
