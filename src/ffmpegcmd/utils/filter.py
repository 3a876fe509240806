import re
from collections.abc import Sequence

# Filter string composer
# For the filtergraph classes, see ../filtergraph/

_re_esc = re.compile(r"([':\\,])")
_re_brackets = re.compile(r"^\[(.*)\]$")


def compose_filter_value(value):
    """compose once-escaped filter option value

    :param value: option value
    :type value: str, bool, seq, or any object convertible to str
    :return: escaped option value string
    :rtype: str

    A first level escaping affects the content of each filter option value, which
    may contain the special character ``:`` used to separate values, or one of the
    escaping characters ``\\'``.
    """

    if isinstance(value, bool):
        value = str(value).lower()  # true|false
    elif not isinstance(value, str) and isinstance(value, Sequence):
        value = "|".join(str(v) for v in value)
    else:
        value = str(value)

    return _re_esc.sub(r"\\\1", value)


def compose_filter_args(options):
    """compose filter option string

    :param options: ordered key-value pairs
    :type options: dict
    :return: filter option string, options separated by ``:``
    :rtype: str
    """

    return ":".join(
        k if v is None else f"{k}={compose_filter_value(v)}"
        for k, v in options.items()
    )


def compose_filter(name, options=None):
    """Compose FFmpeg filter expression

    :param name: filter name
    :type name: str
    :param options: filter options in insertion order
    :type options: dict, optional
    :return: filter expression, once escaped
    :rtype: str
    """

    expr = name
    if options:
        expr = f"{expr}={compose_filter_args(options)}"
    return expr


def bracket(label):
    """wrap a link label in square brackets unless already bracketed

    :param label: link label or stream specifier
    :type label: str
    :return: bracketed label
    :rtype: str
    """
    return label if _re_brackets.match(label) else f"[{label}]"
