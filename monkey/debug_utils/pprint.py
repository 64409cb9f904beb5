import json
from typing import Optional

from monkey.types.objects import Array, Hash, MonkeyObject, ObjectType

# ----------------- ANSI colors -----------------
RESET = "\033[0m"
COLOR_INTEGER = "\033[94m"
COLOR_BOOLEAN = "\033[93m"
COLOR_NULL = "\033[90m"
COLOR_STRING = "\033[92m"
COLOR_FUNCTION = "\033[95m"
COLOR_QUOTE = "\033[96m"
COLOR_ERROR = "\033[91m"

TYPE_COLORS = {
    ObjectType.INTEGER: ("color_integer", COLOR_INTEGER),
    ObjectType.BOOLEAN: ("color_boolean", COLOR_BOOLEAN),
    ObjectType.NULL: ("color_null", COLOR_NULL),
    ObjectType.STRING: ("color_string", COLOR_STRING),
    ObjectType.FUNCTION: ("color_function", COLOR_FUNCTION),
    ObjectType.BUILTIN: ("color_function", COLOR_FUNCTION),
    ObjectType.MACRO: ("color_function", COLOR_FUNCTION),
    ObjectType.QUOTE: ("color_quote", COLOR_QUOTE),
    ObjectType.ERROR: ("color_error", COLOR_ERROR),
}

# ----------------- Defaults -----------------
DEFAULT_OPTIONS = {
    "max_line_length": 80,
    "max_depth": 5,
    "enabled": True,
    "color_integer": True,
    "color_boolean": True,
    "color_null": True,
    "color_string": True,
    "color_function": True,
    "color_quote": True,
    "color_error": True,
}


# ----------------- Colorize utility -----------------
def colorize(obj: MonkeyObject, options: dict = DEFAULT_OPTIONS) -> str:
    text = obj.inspect()
    if not options.get("enabled", True):
        return text
    key, color = TYPE_COLORS.get(obj.type(), (None, None))
    if key is not None and options.get(key, True):
        return f"{color}{text}{RESET}"
    return text


# ----------------- Pretty printer -----------------
def pprint_value(
    obj: Optional[MonkeyObject],
    indent: int = 0,
    options: dict = DEFAULT_OPTIONS,
    _current_depth: int = 0,
) -> str:
    """Render a value for display, breaking long arrays and hashes over lines."""
    if obj is None:
        return ""
    if _current_depth >= options.get("max_depth", 5):
        return "…"

    pad = "  " * indent
    if isinstance(obj, Array):
        parts = [pprint_value(e, indent + 1, options, _current_depth + 1) for e in obj.elements]
        open_, close = "[", "]"
    elif isinstance(obj, Hash):
        parts = [
            f"{pprint_value(p.key, indent + 1, options, _current_depth + 1)}: "
            f"{pprint_value(p.value, indent + 1, options, _current_depth + 1)}"
            for p in obj.pairs.values()
        ]
        open_, close = "{", "}"
    else:
        return colorize(obj, options)

    single_line = open_ + ", ".join(parts) + close
    if "\n" not in single_line and len(obj.inspect()) + indent * 2 <= options.get("max_line_length", 80):
        return single_line

    inner = ",\n".join("  " * (indent + 1) + p for p in parts)
    return f"{open_}\n{inner}\n{pad}{close}"


# ----------------- Load JSON config -----------------
def load_options_from_json(json_str: str) -> dict:
    try:
        user_opts = json.loads(json_str)
    except json.JSONDecodeError:
        return DEFAULT_OPTIONS
    if not isinstance(user_opts, dict):
        return DEFAULT_OPTIONS
    return {**DEFAULT_OPTIONS, **user_opts}
