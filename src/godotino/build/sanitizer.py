"""Sketch name sanitization.

arduino-cli only accepts sketch names made of ASCII letters, digits and
underscores that do not start with a digit.
"""

import string

DEFAULT_SKETCH_NAME = "sketch"

_LETTERS = frozenset(string.ascii_letters + "_")
_DIGITS = frozenset(string.digits)


def sanitize_sketch_name(name: str) -> str:
    """
    Convert an arbitrary project name into a valid sketch name.

    Letters and underscores are kept. Digits are kept unless they would
    lead the name. Runs of any other character become a single underscore,
    except at the start where they are dropped.

    Examples:
        sanitize_sketch_name("my-robot")  -> "my_robot"
        sanitize_sketch_name("a!!!b")     -> "a_b"
        sanitize_sketch_name("123abc")    -> "abc"
        sanitize_sketch_name("!!!")       -> ""

    Args:
        name: Project name

    Returns:
        Sanitized name, possibly empty
    """
    out = []
    for ch in name:
        if ch in _LETTERS:
            out.append(ch)
        elif ch in _DIGITS:
            if out:
                out.append(ch)
        elif out and out[-1] != "_":
            out.append("_")
    return "".join(out)


def sketch_name_for(project_name: str) -> str:
    """Sanitized sketch name, falling back to DEFAULT_SKETCH_NAME."""
    return sanitize_sketch_name(project_name) or DEFAULT_SKETCH_NAME
