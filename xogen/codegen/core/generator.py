"""
Error types, the per-run warning log and the generation entry point.

Everything that can stop a generation run derives from GeneratorError so
callers can tell generator bugs apart from template or configuration issues.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

from ...logging_config import get_logger

logger = get_logger(__name__)


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""

    pass


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


class UnknownKindError(GeneratorError):
    """An enumerated kind (relation, template, conflict scope) was not recognized."""

    def __init__(self, kind: str, value: Any):
        self.kind = kind
        self.value = value
        super().__init__(f"unknown {kind}: {value!r}")


class SchemaError(GeneratorError):
    """The schema model violates one of its invariants."""

    pass


class UnmappedNullableError(GeneratorError):
    """A nullable field has no registered wrapper type."""

    def __init__(self, type_name: str, field_name: str, field_type: str):
        self.type_name = type_name
        self.field_name = field_name
        self.field_type = field_type
        super().__init__(
            f"{type_name}.{field_name} could be null and has no wrapper "
            f"mapping for {field_type}"
        )


class ConcurrencyError(GeneratorError):
    """Per-run state was touched from more than one thread."""

    pass


@dataclass(frozen=True)
class WarningRecord:
    """A single recoverable problem reported during a run."""

    type_name: str
    field_name: str
    message: str


class WarningLog:
    """Append-only warning side channel for one generation run.

    Records are keyed by (type, field) so a field reported by both
    conversion directions is only recorded and logged once.
    """

    def __init__(self):
        self._records: List[WarningRecord] = []
        self._seen: Set[Tuple[str, str]] = set()

    def warn(self, type_name: str, field_name: str, message: str) -> bool:
        """
        Record a warning unless one already exists for the same field.

        Returns:
            True if the record is new.
        """
        key = (type_name, field_name)
        if key in self._seen:
            return False

        self._seen.add(key)
        self._records.append(WarningRecord(type_name, field_name, message))
        logger.warning(f"WARN: {message}")
        return True

    @property
    def records(self) -> Tuple[WarningRecord, ...]:
        return tuple(self._records)

    def messages(self) -> List[str]:
        return [r.message for r in self._records]

    def clear(self):
        self._records.clear()
        self._seen.clear()

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[WarningRecord]:
        return iter(self._records)


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self, code: str, warnings: List[str] = None, metadata: Dict[str, Any] = None
    ):
        """
        Initialize generation result.

        Args:
            code: Generated code
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.code = code
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.success = True
        self.error_message: Optional[str] = None
        self.exception: Optional[Exception] = None

    @classmethod
    def error(cls, message: str, exception: Exception = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls(code="")
        result.success = False
        result.error_message = message
        result.exception = exception
        return result


def generate_code(
    funcs, template: str, context: Optional[Dict[str, Any]] = None
) -> GenerationResult:
    """
    Render one template string against a function table with error handling.

    Args:
        funcs: TemplateFuncs instance bound to this run
        template: Template source text
        context: Template variables

    Returns:
        GenerationResult with code, warnings, and metadata
    """
    from .templates import TemplateEngine, TemplateError

    try:
        engine = TemplateEngine(funcs=funcs.as_mapping())
        code = engine.render_string(template, context or {})

        metadata = {
            "dialect": funcs.dialect.name,
            "short_names": funcs.resolver.cache_size,
            "warning_count": len(funcs.warnings),
        }

        return GenerationResult(code, funcs.warnings.messages(), metadata)

    except (GeneratorError, TemplateError) as e:
        logger.error(f"Code generation failed: {e}")
        return GenerationResult.error(f"Code generation failed: {e}", exception=e)
