from __future__ import annotations

import re
from typing import Sequence
from urllib.parse import quote

from .errors import EmptyQueryError, MalformedTemplateError

# {search} joins the query words with a space, {search\+} with a plus sign
PLACEHOLDER_RE = re.compile(r"\{search(\\\+)?\}")

# \\c inserts c literally, without percent-encoding
ESCAPE_RE = re.compile(r"\\\\(.)", re.S)

SAFE_CHARS = "/:"


def has_placeholder(template: str) -> bool:
    return PLACEHOLDER_RE.search(template) is not None


def encode_argument(arg: str) -> str:
    """Percent-encode one query word, keeping \\\\-escaped characters literal."""
    parts = ESCAPE_RE.split(arg)
    out = []
    for i, part in enumerate(parts):
        # re.split puts captured (escaped) characters at odd indexes
        if i % 2:
            out.append(part)
        else:
            out.append(quote(part, safe=SAFE_CHARS))
    return "".join(out)


def join_query(args: Sequence[str], delimiter: str = " ") -> str:
    return quote(delimiter, safe="+").join(encode_argument(a) for a in args)


def substitute(
    template: str,
    args: Sequence[str],
    *,
    expect_placeholder: bool = False,
    require_query: bool = False,
) -> str:
    """Expand the search placeholders of a URL template.

    Args:
        template: URL template, e.g. ``https://github.com/{search}``
        args: remaining command-line words forming the query
        expect_placeholder: fail when the template has nothing to substitute
        require_query: fail when a placeholder is present but ``args`` is empty

    Returns:
        str: the URL with every placeholder replaced by the encoded query
    """
    if not has_placeholder(template):
        if expect_placeholder:
            raise MalformedTemplateError(template)
        return template

    if not args and require_query:
        raise EmptyQueryError(template)

    def _replace(m: re.Match) -> str:
        delimiter = "+" if m.group(1) else " "
        return join_query(args, delimiter)

    return PLACEHOLDER_RE.sub(_replace, template)
