import re, os, shlex
from collections import abc

from ..filtergraph.abc import FilterGraphObject

__all__ = ["FLAG", "parse_options", "opts_to_args", "form_shell_cmd", "quote_arg"]

FLAG = None

form_shell_cmd = shlex.join

_re_dquote_special = re.compile(r'(["\\$`])')


def parse_options(args):
    """parse command-line option arguments

    :param args: argument string or sequence of arguments
    :type args: str or seq of str
    :return: parsed options. Flag options get None as their values.
    :rtype: dict
    """
    if isinstance(args, str):
        args = shlex.split(args)
    res = {}
    n = len(args)
    i = 0
    while i < n:
        key = args[i][1:]
        i += 1
        if i < n and not args[i].startswith("-"):
            if key not in res:
                res[key] = args[i]
            elif isinstance(res[key], str):
                res[key] = [res[key], args[i]]
            else:
                res[key].append(args[i])
            i += 1
        else:
            res[key] = FLAG
    return res


def finalize_option_value(val):
    """stringify an option value

    Filtergraph objects are composed here so their pad labels reflect the state
    of the graph at the time the arguments are generated.
    """
    if isinstance(val, FilterGraphObject):
        return val.compose()
    if isinstance(val, bool):
        return str(int(val))
    return str(val)


def opts_to_args(opts):
    """convert an option dict to a list of command-line arguments

    :param opts: FFmpeg options keyed by the option names without the preceding dash
    :type opts: dict or None
    :return: list of arguments
    :rtype: list of str

    Each key becomes ``-key``. The value follows as the next argument unless it
    is ``None`` (i.e., ``FLAG``). A non-str sequence value repeats the option
    once per item.
    """
    args = []
    if not opts:
        return args

    for key, val in opts.items():
        karg = f"-{key}"
        if not isinstance(val, (str, FilterGraphObject)) and isinstance(
            val, abc.Sequence
        ):
            for v in val:
                args.append(karg)
                if v is not None:
                    args.append(finalize_option_value(v))
        else:
            args.append(karg)
            if val is not None:
                args.append(finalize_option_value(val))
    return args


def null_url():
    """url of the null device"""
    return "/dev/null" if os.name != "nt" else "NUL"


def quote_arg(arg):
    """quote a command-line argument for display

    Option flags (starting with ``-``) are returned as is; everything else is
    wrapped in double quotes.
    """
    if arg.startswith("-"):
        return arg
    return '"' + _re_dquote_special.sub(r"\\\1", arg) + '"'
