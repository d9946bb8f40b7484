"""
Naming utilities for safe code generation.

Case conversions between database (snake_case) and Go (CamelCase)
spellings, with awareness of Go's common initialisms (ID, URL, ...).
"""

import re
from typing import List

# Initialisms that Go style keeps fully upper case.
COMMON_INITIALISMS = frozenset(
    {
        "ACL", "API", "ASCII", "CPU", "CSS", "DNS", "EOF", "GUID", "HTML",
        "HTTP", "HTTPS", "ID", "IP", "JSON", "LHS", "QPS", "RAM", "RHS",
        "RPC", "SLA", "SMTP", "SQL", "SSH", "TCP", "TLS", "TTL", "UDP",
        "UI", "UID", "UUID", "URI", "URL", "UTF8", "VM", "XML", "XMPP",
        "XSRF", "XSS",
    }
)

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_SEPARATORS = re.compile(r"[-\s]+")
_UNDERSCORES = re.compile(r"_+")


def camel_to_snake(name: str) -> str:
    """
    Convert CamelCase (or mixed) names to snake_case.

    Runs of capitals are treated as one word, so ``UserID`` becomes
    ``user_id`` and ``HTTPServer`` becomes ``http_server``.
    """
    s = _SEPARATORS.sub("_", name)
    s = _ACRONYM_BOUNDARY.sub(r"\1_\2", s)
    s = _WORD_BOUNDARY.sub(r"\1_\2", s)
    s = _UNDERSCORES.sub("_", s)
    return s.strip("_").lower()


def split_words(name: str) -> List[str]:
    """Split any spelling of a name into its lowercase words."""
    return [w for w in camel_to_snake(name).split("_") if w]


def _camel_word(word: str) -> str:
    upper = word.upper()
    if upper in COMMON_INITIALISMS:
        return upper
    return word[:1].upper() + word[1:]


def snake_to_camel(name: str) -> str:
    """``user_id`` -> ``UserID``."""
    return "".join(_camel_word(w) for w in split_words(name))


def force_lower_camel_identifier(name: str) -> str:
    """
    Convert a name to a lowerCamel Go identifier, keeping initialisms.

    ``created_at`` -> ``createdAt``, ``owner_id`` -> ``ownerID``. The
    result is always a valid identifier: empty input gives ``_`` and a
    leading digit is prefixed with ``_``.
    """
    words = split_words(name)
    if not words:
        return "_"

    ident = words[0] + "".join(_camel_word(w) for w in words[1:])
    if ident[0].isdigit():
        ident = "_" + ident
    return ident


def snake_to_camel_without_initialisms(name: str) -> str:
    """
    Protobuf-generated Go field spelling of a column name.

    protoc-gen-go does not know about initialisms, so ``user_id`` becomes
    ``UserId`` rather than ``UserID``.
    """
    return "".join(w[:1].upper() + w[1:].lower() for w in name.split("_") if w)


def go_package_name(name: str) -> str:
    """``public_story`` -> ``publicstory``."""
    return name.replace("-", "").replace("_", "")


def proto_name(name: str) -> str:
    """``public-story`` -> ``public_story``."""
    return name.replace("-", "_")
