"""
Go type mapping for generated data-access code.

Qualifies custom types with their package, spells conversions between
differently typed fields, and classifies fields for the protobuf bridge.
"""

from enum import Enum
from typing import Optional

from ...core.config import GeneratorConfig
from ...core.schema import Field

BYTES_TYPE = "[]byte"
SLICE_MARKER = "[]"
EMPTY_VALUE_MARKER = "{}"


class ConversionKind(Enum):
    """How a field crosses the model/protobuf boundary."""

    TIMESTAMP = "timestamp"  # time.Time <-> Timestamp, fallible
    CAST = "cast"  # registered scalar, explicit type conversion
    DIRECT = "direct"  # plain assignment
    NULLABLE_TIMESTAMP = "nullable_timestamp"  # guarded, fallible
    WRAPPER = "wrapper"  # guarded wrap/unwrap via wrappers.proto
    UNMAPPED = "unmapped"  # nullable without a wrapper mapping

    @property
    def is_guarded(self) -> bool:
        return self in (ConversionKind.NULLABLE_TIMESTAMP, ConversionKind.WRAPPER)


class GoTypeMapper:
    """
    Central engine for mapping schema types to Go and protobuf types.

    All decisions are driven by the run configuration; the mapper holds no
    state of its own.
    """

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize with run configuration."""
        self.config = config or GeneratorConfig()

    def _package_prefix(self) -> str:
        pkg = self.config.custom_type_package
        return pkg + "." if pkg else ""

    def retype(self, typ: str) -> str:
        """
        Qualify typ with the custom type package unless it is a known type.

        Package-qualified types are returned unchanged; slice markers are
        kept in front of the qualified element type.
        """
        if "." in typ:
            return typ

        prefix = ""
        while typ.startswith(SLICE_MARKER):
            typ = typ[len(SLICE_MARKER):]
            prefix += SLICE_MARKER

        if typ not in self.config.known_types:
            return prefix + self._package_prefix() + typ

        return prefix + typ

    def reniltype(self, typ: str) -> str:
        """Apply the retype rule to a nil-value spelling such as ``Status{}``."""
        if "." in typ:
            return typ

        if typ.endswith(EMPTY_VALUE_MARKER):
            if typ[: -len(EMPTY_VALUE_MARKER)] in self.config.known_types:
                return typ

            return self._package_prefix() + typ

        return typ

    def is_nullable_wrapper(self, typ: str) -> bool:
        return typ.startswith(self.config.nullable_prefix)

    def convext(self, prefix: str, source: Field, dest: Field) -> str:
        """
        Go expression converting ``prefix.source`` so it is assignable to dest.

        ``sql.NullInt64`` sources are unwrapped to their value accessor
        before comparing against the destination type.
        """
        expr = f"{prefix}.{source.name}"
        if source.type == dest.type:
            return expr

        source_type = source.type
        if self.is_nullable_wrapper(source_type):
            accessor = source_type[len(self.config.nullable_prefix):]
            expr = f"{expr}.{accessor}"
            source_type = accessor.lower()

        if dest.type != source_type:
            expr = f"{dest.type}({expr})"

        return expr

    def nullable_accessor(self, typ: str) -> str:
        """Value field of a nullable struct: ``sql.NullInt64`` -> ``Int64``."""
        name = typ.rsplit(".", 1)[-1]
        if name.startswith("Null") and len(name) > 4:
            return name[4:]
        return name

    def is_geometry(self, typ: str) -> bool:
        return typ in self.config.geo_info_types

    def is_time(self, typ: str) -> bool:
        return typ == self.config.time_type

    def is_nullable_time(self, typ: str) -> bool:
        return typ in self.config.nullable_time_types

    def wrapper_type(self, typ: str) -> Optional[str]:
        return self.config.wrapper_type_map.get(typ)

    def pb_cast_type(self, typ: str) -> Optional[str]:
        """Protobuf scalar usable as a Go conversion for typ, if any."""
        pb_type = self.config.to_pb_type_map.get(typ)
        if pb_type is None or pb_type in self.config.incompatible_pb_types:
            return None
        return pb_type

    def import_for(self, typ: str) -> Optional[str]:
        return self.config.import_map.get(typ)

    def is_always_present(self, f: Field) -> bool:
        """Non-nullable fields, and byte slices (nil already means absent)."""
        return not f.is_nullable or f.type == BYTES_TYPE

    def conversion_kind(self, f: Field) -> ConversionKind:
        """Classify how f is converted between model and message."""
        if self.is_always_present(f):
            if self.is_time(f.type):
                return ConversionKind.TIMESTAMP
            if self.pb_cast_type(f.type):
                return ConversionKind.CAST
            return ConversionKind.DIRECT

        if self.is_nullable_time(f.type):
            return ConversionKind.NULLABLE_TIMESTAMP
        if self.wrapper_type(f.type):
            return ConversionKind.WRAPPER
        return ConversionKind.UNMAPPED

    def proto_type(self, typ: str) -> str:
        """Type used for typ in a protobuf message definition."""
        if self.is_time(typ) or self.is_nullable_time(typ):
            return "google.protobuf.Timestamp"

        wrapper = self.wrapper_type(typ)
        if wrapper:
            return f"google.protobuf.{wrapper}"

        return self.config.to_pb_type_map.get(typ, typ)
