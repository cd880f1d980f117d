"""Light color parsing.

Channel payloads carry LED colors as hex strings without a leading ``#``
("FFFF0000" is opaque red). The store keeps colors as signed 32-bit ARGB
integers, the representation the platform reports back.
"""

import re

HEX_COLOR_PATTERN = re.compile(r"^#?([A-Fa-f0-9]{6}|[A-Fa-f0-9]{8})$")

# Named colors accepted in place of hex, as ARGB
NAMED_COLORS: dict[str, int] = {
    "black": 0xFF000000,
    "darkgray": 0xFF444444,
    "darkgrey": 0xFF444444,
    "gray": 0xFF888888,
    "grey": 0xFF888888,
    "lightgray": 0xFFCCCCCC,
    "lightgrey": 0xFFCCCCCC,
    "white": 0xFFFFFFFF,
    "red": 0xFFFF0000,
    "green": 0xFF00FF00,
    "blue": 0xFF0000FF,
    "yellow": 0xFFFFFF00,
    "cyan": 0xFF00FFFF,
    "magenta": 0xFFFF00FF,
    "aqua": 0xFF00FFFF,
    "fuchsia": 0xFFFF00FF,
    "lime": 0xFF00FF00,
    "maroon": 0xFF800000,
    "navy": 0xFF000080,
    "olive": 0xFF808000,
    "purple": 0xFF800080,
    "silver": 0xFFC0C0C0,
    "teal": 0xFF008080,
}


def to_signed_argb(value: int) -> int:
    """Reinterpret an unsigned 32-bit ARGB value as a signed int.

    >>> to_signed_argb(0xFFFF0000)
    -65536
    """
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def parse_light_color(raw: str | None) -> int | None:
    """Parse a hex or named color into a signed ARGB int.

    Args:
        raw: "AARRGGBB", "RRGGBB" (treated as opaque), either with an
            optional "#", or a color name such as "red".

    Returns:
        Signed ARGB int, or None when the value cannot be parsed.
    """
    if raw is None:
        return None
    text = raw.strip()
    named = NAMED_COLORS.get(text.lower())
    if named is not None:
        return to_signed_argb(named)

    match = HEX_COLOR_PATTERN.match(text)
    if match is None:
        return None
    digits = match.group(1)
    if len(digits) == 6:
        digits = "FF" + digits
    return to_signed_argb(int(digits, 16))
