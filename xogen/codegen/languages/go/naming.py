"""
Go-specific naming: reserved names, short receiver names and parameter names.
"""

import threading
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Set

from ....logging_config import get_logger
from ...core.generator import ConcurrencyError, UnknownKindError
from ...core.naming import camel_to_snake
from ...core.schema import Field, QueryParam

logger = get_logger(__name__)


# Go reserved names mapped to "safe" replacements
GO_RESERVED_NAMES: Dict[str, str] = {
    "break": "brk",
    "case": "cs",
    "chan": "chn",
    "const": "cnst",
    "continue": "cnt",
    "default": "def",
    "defer": "dfr",
    "else": "els",
    "fallthrough": "flthrough",
    "for": "fr",
    "func": "fn",
    "go": "goVal",
    "goto": "gt",
    "if": "ifVal",
    "import": "imp",
    "interface": "iface",
    "map": "mp",
    "package": "pkg",
    "range": "rnge",
    "return": "ret",
    "select": "slct",
    "struct": "strct",
    "switch": "swtch",
    "type": "typ",
    "var": "vr",
    # go types
    "error": "e",
    "bool": "b",
    "string": "str",
    "byte": "byt",
    "rune": "r",
    "uintptr": "uptr",
    "int": "i",
    "int8": "i8",
    "int16": "i16",
    "int32": "i32",
    "int64": "i64",
    "uint": "u",
    "uint8": "u8",
    "uint16": "u16",
    "uint32": "u32",
    "uint64": "u64",
    "float32": "z",
    "float64": "f",
    "complex64": "c",
    "complex128": "c128",
}

# Packages imported by every generated file
DEFAULT_IMPORT_CONFLICTS = frozenset(
    {"sql", "driver", "csv", "errors", "fmt", "regexp", "strings", "time"}
)


class ShortNameResolver:
    """
    Derives short Go identifiers for types and keeps them stable for a run.

    A short name is the concatenation of the first character of each word of
    the type name, ignoring ``id`` words: ``MyCustomName`` becomes ``mcn``.
    Computed names that are Go reserved words are swapped for their safe
    alias before being cached. Names that conflict with a default import or
    with any of the caller's scope conflicts get the conflict suffix.

    One resolver belongs to one generation run on one thread.
    """

    def __init__(
        self,
        name_conflict_suffix: str = "Val",
        reserved_names: Optional[Mapping[str, str]] = None,
        default_conflicts: Iterable[str] = DEFAULT_IMPORT_CONFLICTS,
    ):
        self.name_conflict_suffix = name_conflict_suffix
        self.reserved_names = dict(GO_RESERVED_NAMES)
        if reserved_names:
            self.reserved_names.update(reserved_names)
        self.default_conflicts = frozenset(default_conflicts)
        self._cache: Dict[str, str] = {}
        self._owner: Optional[int] = None

    def _check_thread(self):
        ident = threading.get_ident()
        if self._owner is None:
            self._owner = ident
        elif self._owner != ident:
            raise ConcurrencyError(
                "ShortNameResolver is bound to the thread of its first use; "
                "create one resolver per generation thread"
            )

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def reset(self):
        """Discard all cached names (end of a run)."""
        self._cache.clear()
        self._owner = None

    def compute(self, type_name: str) -> str:
        """Compute the short name for type_name without touching the cache."""
        letters = [w[:1] for w in camel_to_snake(type_name).split("_") if w and w != "id"]
        name = "".join(letters)
        return self.reserved_names.get(name, name)

    def short_name(self, type_name: str, *scope_conflicts) -> str:
        """
        Return the short identifier for type_name.

        Args:
            type_name: Go type name
            *scope_conflicts: names already in scope; each entry is a str or
                an iterable of str, Field or QueryParam

        Raises:
            UnknownKindError: for an unsupported scope conflict kind
            ConcurrencyError: if used from a second thread
        """
        self._check_thread()

        name = self._cache.get(type_name)
        if name is None:
            name = self.compute(type_name)
            self._cache[type_name] = name
            logger.debug(f"short name for {type_name}: {name}")

        conflicts = set(self.default_conflicts)
        for scope in scope_conflicts:
            conflicts.update(_scope_names(scope))

        if name in conflicts:
            name = name + self.name_conflict_suffix

        return name


def _scope_names(scope) -> Set[str]:
    if isinstance(scope, str):
        return {scope}

    if isinstance(scope, (list, tuple, set, frozenset)):
        names = set()
        for item in scope:
            if isinstance(item, (Field, QueryParam)):
                names.add(item.name)
            elif isinstance(item, str):
                names.add(item)
            else:
                raise UnknownKindError("conflict scope", type(item).__name__)
        return names

    raise UnknownKindError("conflict scope", type(scope).__name__)


def param_name(
    field_name: str, reserved_names: Mapping[str, str] = GO_RESERVED_NAMES
) -> str:
    """
    Go parameter name for a field: the first word lower-cased, the rest as is.

    ``UserID`` -> ``userID``, ``Type`` -> ``typ``. A leading separator
    makes the first word empty, so ``_Type`` stays ``_Type``.
    """
    if field_name.startswith(("_", "-")):
        name = field_name
    else:
        first = camel_to_snake(field_name).split("_")[0]
        name = first.lower() + field_name[len(first):]

    return reserved_names.get(name.lower(), name)


def go_param_list(
    fields: List[Field],
    add_prefix: bool,
    add_type: bool,
    ignore_names: Iterable[str] = (),
    retype: Optional[Callable[[str], str]] = None,
    reserved_names: Mapping[str, str] = GO_RESERVED_NAMES,
) -> str:
    """
    Convert fields into a Go parameter list.

    Produces ``a, b, c`` or, with add_type, ``a T1, b T2``. With add_prefix a
    non-empty result is prefixed with ``", "``. Unnamed fields become
    ``v0``, ``v1``... numbered by position among the non-ignored fields.
    """
    ignore = set(ignore_names)

    vals = []
    for f in fields:
        if f.name in ignore:
            continue

        if f.name:
            s = param_name(f.name, reserved_names)
        else:
            s = f"v{len(vals)}"

        if add_type:
            s += " " + (retype(f.type) if retype else f.type)

        vals.append(s)

    result = ", ".join(vals)
    if add_prefix and result:
        return ", " + result

    return result
