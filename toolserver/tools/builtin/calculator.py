"""Calculator tool — one binary arithmetic operation."""
import math
import operator as _op
from decimal import Decimal
from typing import Union

from ...config import Settings
from ...contracts import Param, text_output_contract
from ..errors import ToolFailure
from ..registry import ToolDescriptor

DESCRIPTION = "Takes two numbers and an operator and returns the result."

Number = Union[int, float]

_OPERATIONS = {
    "+": _op.add,
    "-": _op.sub,
    "*": _op.mul,
    "/": _op.truediv,
}


def format_number(value: Number) -> str:
    """Render a double the way JS Number#toString does.

    Shortest round-trip digits; plain decimal for 1e-7 <= |x| < 1e21,
    otherwise exponent form ("1e-7", "1.5e+21").
    """
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    k = len(digits)
    n = k + exponent  # value = 0.<digits> * 10**n

    if k <= n <= 21:
        text = digits + "0" * (n - k)
    elif 0 < n <= 21:
        text = f"{digits[:n]}.{digits[n:]}"
    elif -6 < n <= 0:
        text = "0." + "0" * -n + digits
    else:
        e = n - 1
        mantissa = digits if k == 1 else f"{digits[0]}.{digits[1:]}"
        text = f"{mantissa}e{'+' if e > 0 else '-'}{abs(e)}"
    return sign + text


async def calculator(a: Number, b: Number, operator: str) -> str:
    try:
        x, y = float(a), float(b)
    except OverflowError as e:
        raise ToolFailure("number out of range") from e
    if operator == "/" and y == 0:
        raise ToolFailure("division by zero")
    func = _OPERATIONS.get(operator)
    if func is None:
        raise ToolFailure(f"unsupported operator: {operator}")
    result = func(x, y)
    return f"{format_number(x)} {operator} {format_number(y)} = {format_number(result)}"


def descriptor(settings: Settings) -> ToolDescriptor:
    return ToolDescriptor(
        name="calculator",
        description=DESCRIPTION,
        params=(
            Param("a", type="number", description="first operand"),
            Param("b", type="number", description="second operand"),
            Param("operator", type="enum", values=tuple(_OPERATIONS), description="operator (+, -, *, /)"),
        ),
        handler=calculator,
        output=tuple(text_output_contract("calculation result")),
    )
