"""
Protobuf bridge for generated Go models.

Builds protobuf message definitions for table types plus the bodies of
the two conversion functions (model -> message, message -> model).

Planning and rendering are separate steps: ``plan_*``/``build_*`` produce a
small intermediate representation (messages, fields, conversion
statements) and the ``render_*`` functions turn it into text. Field
numbering and skip handling can therefore be inspected without parsing
the generated code.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from ....logging_config import get_logger
from ...core.config import GeneratorConfig
from ...core.generator import GeneratorError, UnmappedNullableError, WarningLog
from ...core.naming import (
    force_lower_camel_identifier,
    go_package_name,
    proto_name,
    snake_to_camel_without_initialisms,
)
from ...core.schema import Field, MethodsOption
from .naming import ShortNameResolver
from .types import ConversionKind, GoTypeMapper

logger = get_logger(__name__)


# Intermediate representation


@dataclass(frozen=True)
class ProtoField:
    type: str
    name: str
    number: int
    comment: str = ""


@dataclass(frozen=True)
class ProtoMessage:
    name: str
    fields: Tuple[ProtoField, ...]


@dataclass(frozen=True)
class ProtoFile:
    package: str
    imports: Tuple[str, ...]
    go_package: str
    messages: Tuple[ProtoMessage, ...]


@dataclass(frozen=True)
class TimestampConversion:
    """``var, err := ptypes.<func>(source)`` followed by an error return."""

    var: str
    func: str
    source: str


@dataclass(frozen=True)
class FieldAssignment:
    """One ``key:value,`` entry of a struct literal."""

    key: str
    value: str


@dataclass(frozen=True)
class GuardedTimestamp:
    """Timestamp conversion that only runs when condition holds."""

    condition: str
    conversion: TimestampConversion
    target: str
    value: str


@dataclass(frozen=True)
class GuardedAssignment:
    condition: str
    target: str
    value: str


GuardedStatement = Union[GuardedTimestamp, GuardedAssignment]


@dataclass(frozen=True)
class ConversionPlan:
    """Body of a conversion function."""

    prelude: Tuple[TimestampConversion, ...]
    result_name: str
    literal_type: str
    assignments: Tuple[FieldAssignment, ...]
    guarded: Tuple[GuardedStatement, ...]


# Rendering


def render_timestamp_conversion(stmt: TimestampConversion, indent: str = "") -> str:
    return (
        f"{indent}{stmt.var}, err := ptypes.{stmt.func}({stmt.source})\n"
        f"\tif err != nil {{\n"
        f"\t\treturn nil, err\n"
        f"\t}}\n"
    )


def render_guarded(stmt: GuardedStatement) -> str:
    if isinstance(stmt, GuardedTimestamp):
        conversion = render_timestamp_conversion(stmt.conversion, indent="\t")
        return (
            f"if {stmt.condition} {{\n"
            f"{conversion}"
            f"\t{stmt.target} = {stmt.value}\n"
            f"}}\n"
        )
    return f"if {stmt.condition} {{\n\t{stmt.target} = {stmt.value}\n}}\n"


def render_conversion(plan: ConversionPlan) -> str:
    """Render a conversion plan as the body of a Go function."""
    body = "".join(render_timestamp_conversion(s) for s in plan.prelude)

    assignments = "\n".join(f"{a.key}:{a.value}," for a in plan.assignments)
    body += f"{plan.result_name} := &{plan.literal_type}{{\n\t{assignments}\n}}\n"

    body += "".join(render_guarded(s) for s in plan.guarded)
    body += f"\nreturn {plan.result_name}, nil"
    return body


def render_field(f: ProtoField) -> str:
    definition = f"\t{f.type} {f.name} = {f.number};"
    if not f.comment:
        return definition

    comment = f.comment if f.comment.startswith("//") else f"// {f.comment}"
    return f"\t{comment}\n{definition}"


def render_message(message: ProtoMessage) -> str:
    fields = "\n".join(render_field(f) for f in message.fields)
    return f"message {message.name} {{\n{fields}\n}}\n"


def render_proto_file(proto_file: ProtoFile) -> str:
    imports = "\n".join(f'import "{i}";' for i in proto_file.imports)
    header = (
        f"package proto.{proto_file.package};\n"
        f"\n"
        f"{imports}\n"
        f"\n"
        f'option go_package = "{proto_file.go_package}";\n'
        f"option java_multiple_files = true;\n"
        f'option objc_class_prefix = "RPC";\n'
        f"\n"
    )
    return header + "".join(render_message(m) for m in proto_file.messages)


# Planning


class ProtoBridge:
    """Plans and renders the protobuf side of a generated model."""

    def __init__(
        self,
        config: GeneratorConfig,
        type_mapper: Optional[GoTypeMapper] = None,
        resolver: Optional[ShortNameResolver] = None,
        warnings: Optional[WarningLog] = None,
    ):
        self.config = config
        self.type_mapper = type_mapper or GoTypeMapper(config)
        self.resolver = resolver or ShortNameResolver(config.name_conflict_suffix)
        self.warnings = warnings if warnings is not None else WarningLog()

    def planned_fields(
        self, option: MethodsOption
    ) -> List[Tuple[Field, ConversionKind]]:
        """Fields surviving the skip list, in declaration order, with their kind."""
        return [
            (f, self.type_mapper.conversion_kind(f))
            for f in option.type.fields
            if not option.is_skipped(f)
        ]

    def _unmapped(self, option: MethodsOption, f: Field):
        type_name = option.type.name
        if self.config.strict_nullable_mapping:
            raise UnmappedNullableError(type_name, f.name, f.type)
        self.warnings.warn(
            type_name, f.name, f"{type_name}.{f.name} could be null, skipping!"
        )

    def build_message(self, option: MethodsOption) -> ProtoMessage:
        """Message definition; numbers are 1-based over the post-skip fields."""
        fields = tuple(
            ProtoField(
                type=self.type_mapper.proto_type(f.type),
                name=f.column_name,
                number=number,
                comment=f.comment,
            )
            for number, f in enumerate(
                (f for f in option.type.fields if not option.is_skipped(f)), start=1
            )
        )
        return ProtoMessage(option.type.name, fields)

    def build_file(self, options: Sequence[MethodsOption]) -> Optional[ProtoFile]:
        """
        Proto file for all options with the bridge enabled.

        Messages are ordered by a stable, case-sensitive sort on the option
        grouping key; the package comes from the first option after sorting.
        """
        enabled = sorted(
            (o for o in options if o.model_to_pb and o.model_to_pb_config),
            key=lambda o: o.sub,
        )
        if not enabled:
            return None

        service = enabled[0].model_to_pb_config.import_service

        imports: List[str] = []
        for option in enabled:
            for f in option.type.fields:
                if option.is_skipped(f):
                    continue
                path = self.type_mapper.import_for(f.type)
                if path and path not in imports:
                    imports.append(path)

        return ProtoFile(
            package=proto_name(service),
            imports=tuple(imports),
            go_package=(
                f"{self.config.server_proto_path_prefix}"
                f"/service/{go_package_name(service)}"
            ),
            messages=tuple(self.build_message(o) for o in enabled),
        )

    @staticmethod
    def _require_bridge_config(option: MethodsOption):
        if option.model_to_pb_config is None:
            raise GeneratorError(
                f"{option.type.name}: model_to_pb requires a model_to_pb_config"
            )

    def plan_model_to_pb(self, option: MethodsOption) -> ConversionPlan:
        self._require_bridge_config(option)

        short = self.resolver.short_name(option.type.name)
        package = go_package_name(option.model_to_pb_config.import_service)
        type_name = option.type.name
        proto_var = f"proto{type_name}"

        prelude = []
        assignments = []
        guarded = []

        for f, kind in self.planned_fields(option):
            pb_name = snake_to_camel_without_initialisms(f.column_name)
            source = f"{short}.{f.name}"

            if kind == ConversionKind.TIMESTAMP:
                var = force_lower_camel_identifier(f.column_name)
                prelude.append(TimestampConversion(var, "TimestampProto", source))
                assignments.append(FieldAssignment(pb_name, var))
            elif kind == ConversionKind.CAST:
                pb_type = self.type_mapper.pb_cast_type(f.type)
                assignments.append(FieldAssignment(pb_name, f"{pb_type}({source})"))
            elif kind == ConversionKind.DIRECT:
                assignments.append(FieldAssignment(pb_name, source))
            elif kind == ConversionKind.NULLABLE_TIMESTAMP:
                var = force_lower_camel_identifier(f.column_name)
                guarded.append(
                    GuardedTimestamp(
                        condition=f"{source}.Valid",
                        conversion=TimestampConversion(var, "TimestampProto", f"{source}.Time"),
                        target=f"{proto_var}.{pb_name}",
                        value=var,
                    )
                )
            elif kind == ConversionKind.WRAPPER:
                wrapper = self.type_mapper.wrapper_type(f.type)
                accessor = self.type_mapper.nullable_accessor(f.type)
                guarded.append(
                    GuardedAssignment(
                        condition=f"{source}.Valid",
                        target=f"{proto_var}.{pb_name}",
                        value=f"&wrappers.{wrapper}{{Value:{source}.{accessor}}}",
                    )
                )
            else:
                self._unmapped(option, f)

        return ConversionPlan(
            prelude=tuple(prelude),
            result_name=proto_var,
            literal_type=f"{package}.{type_name}",
            assignments=tuple(assignments),
            guarded=tuple(guarded),
        )

    def plan_pb_to_model(self, option: MethodsOption) -> ConversionPlan:
        self._require_bridge_config(option)

        short = self.resolver.short_name(option.type.name)
        type_name = option.type.name
        proto_var = f"proto{type_name}"

        prelude = []
        assignments = []
        guarded = []

        for f, kind in self.planned_fields(option):
            source = f"{proto_var}.{snake_to_camel_without_initialisms(f.column_name)}"

            if kind == ConversionKind.TIMESTAMP:
                var = force_lower_camel_identifier(f.column_name)
                prelude.append(TimestampConversion(var, "Timestamp", source))
                assignments.append(FieldAssignment(f.name, var))
            elif kind == ConversionKind.CAST:
                assignments.append(FieldAssignment(f.name, f"{f.type}({source})"))
            elif kind == ConversionKind.DIRECT:
                assignments.append(FieldAssignment(f.name, source))
            elif kind == ConversionKind.NULLABLE_TIMESTAMP:
                var = force_lower_camel_identifier(f.column_name)
                guarded.append(
                    GuardedTimestamp(
                        condition=f"{source} != nil",
                        conversion=TimestampConversion(var, "Timestamp", source),
                        target=f"{short}.{f.name}",
                        value=f"{f.type}{{Time:{var}, Valid:true}}",
                    )
                )
            elif kind == ConversionKind.WRAPPER:
                accessor = self.type_mapper.nullable_accessor(f.type)
                guarded.append(
                    GuardedAssignment(
                        condition=f"{source} != nil",
                        target=f"{short}.{f.name}",
                        value=f"{f.type}{{{accessor}:{source}.Value, Valid:true}}",
                    )
                )
            else:
                self._unmapped(option, f)

        return ConversionPlan(
            prelude=tuple(prelude),
            result_name=short,
            literal_type=type_name,
            assignments=tuple(assignments),
            guarded=tuple(guarded),
        )

    def model_to_pb(self, option: MethodsOption) -> str:
        """Body converting the model value to its protobuf message."""
        if not option.model_to_pb:
            return ""
        return render_conversion(self.plan_model_to_pb(option))

    def pb_to_model(self, option: MethodsOption) -> str:
        """Body converting the protobuf message back to the model value."""
        if not option.model_to_pb:
            return ""
        return render_conversion(self.plan_pb_to_model(option))

    def proto(self, options: Sequence[MethodsOption]) -> str:
        """Complete .proto text for the given options."""
        proto_file = self.build_file(options)
        if proto_file is None:
            return ""
        logger.debug(
            f"rendering proto package {proto_file.package} "
            f"with {len(proto_file.messages)} messages"
        )
        return render_proto_file(proto_file)
