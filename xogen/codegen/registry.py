"""
SQL dialect registry.

Each dialect supplies the positional placeholder spelling and identifier
escaping used when rendering SQL fragments into generated code.
"""

from typing import Dict, Type, Optional, List

from .core.schema import EscType


class RegistryError(Exception):
    """Exception raised for registry-related errors."""

    pass


class Dialect:
    """Base dialect: ``$n`` placeholders and double-quote escaping."""

    name: str = "generic"
    open_quote: str = '"'
    close_quote: str = '"'

    def nth_param(self, i: int) -> str:
        """Placeholder for the 0-based parameter position ``i``."""
        return f"${i + 1}"

    def escape(self, esc_type: EscType, name: str) -> str:
        """Escape an identifier of the given kind."""
        return f"{self.open_quote}{name}{self.close_quote}"


class PostgresDialect(Dialect):
    """PostgreSQL (``$1``, ``"name"``)."""

    name = "postgres"


class SQLiteDialect(Dialect):
    """SQLite (``$1``, ``"name"``)."""

    name = "sqlite3"


class MySQLDialect(Dialect):
    """MySQL (``?``, backticks)."""

    name = "mysql"
    open_quote = "`"
    close_quote = "`"

    def nth_param(self, i: int) -> str:
        return "?"


class MSSQLDialect(Dialect):
    """SQL Server (``@p1``, ``[name]``)."""

    name = "mssql"
    open_quote = "["
    close_quote = "]"

    def nth_param(self, i: int) -> str:
        return f"@p{i + 1}"


class OracleDialect(Dialect):
    """Oracle (``:1``, ``"name"``)."""

    name = "oracle"

    def nth_param(self, i: int) -> str:
        return f":{i + 1}"


class DialectRegistry:
    """Registry for managing available SQL dialects."""

    def __init__(self):
        """Initialize empty registry."""
        self._dialects: Dict[str, Type[Dialect]] = {}
        self._aliases: Dict[str, str] = {}

    def register(
        self,
        name: str,
        dialect_class: Type[Dialect],
        aliases: Optional[List[str]] = None,
        replace: bool = False,
    ):
        """
        Register a dialect.

        Args:
            name: Primary dialect name (e.g., 'postgres', 'mysql')
            dialect_class: Class implementing Dialect
            aliases: Alternative names for this dialect
            replace: If True, replace existing registration. If False, skip if exists.

        Raises:
            RegistryError: If dialect class is invalid or an alias conflicts
        """
        if not issubclass(dialect_class, Dialect):
            raise RegistryError("Dialect class must inherit from Dialect")

        key = name.lower()

        if key in self._dialects and not replace:
            return

        alias_keys = [a.lower() for a in aliases or [] if a.lower() != key]

        if not replace:
            for alias_key in alias_keys:
                if alias_key in self._dialects:
                    raise RegistryError(
                        f"Alias '{alias_key}' conflicts with existing primary dialect"
                    )
                if alias_key in self._aliases and self._aliases[alias_key] != key:
                    raise RegistryError(
                        f"Alias '{alias_key}' already points to "
                        f"'{self._aliases[alias_key]}'"
                    )

        self._dialects[key] = dialect_class
        for alias_key in alias_keys:
            self._aliases[alias_key] = key

    def get_dialect_class(self, name: str) -> Type[Dialect]:
        """
        Get dialect class by name or alias.

        Raises:
            RegistryError: If dialect not found
        """
        key = name.lower()

        if key in self._dialects:
            return self._dialects[key]

        if key in self._aliases:
            return self._dialects[self._aliases[key]]

        raise RegistryError(
            f"No dialect registered for: {name}. "
            f"Available: {', '.join(self.list_dialects())}"
        )

    def create_dialect(self, name: str) -> Dialect:
        return self.get_dialect_class(name)()

    def list_dialects(self) -> List[str]:
        """Get list of registered primary dialect names."""
        return sorted(self._dialects.keys())

    def is_supported(self, name: str) -> bool:
        key = name.lower()
        return key in self._dialects or key in self._aliases


# Global registry instance - created once
_global_registry: Optional[DialectRegistry] = None


def get_registry() -> DialectRegistry:
    """Get the global dialect registry, initializing if needed."""
    global _global_registry
    if _global_registry is None:
        _global_registry = DialectRegistry()
        _register_builtin_dialects(_global_registry)
    return _global_registry


def _register_builtin_dialects(registry: DialectRegistry):
    registry.register("postgres", PostgresDialect, aliases=["pgsql", "postgresql", "pg"])
    registry.register("mysql", MySQLDialect, aliases=["mariadb", "my"])
    registry.register("sqlite3", SQLiteDialect, aliases=["sqlite", "file", "sq"])
    registry.register("mssql", MSSQLDialect, aliases=["sqlserver", "ms"])
    registry.register("oracle", OracleDialect, aliases=["ora", "godror", "or"])


def get_dialect(name: str) -> Dialect:
    """Get a dialect instance from the global registry."""
    return get_registry().create_dialect(name)


def list_supported_dialects() -> List[str]:
    """List all supported dialects from global registry."""
    return get_registry().list_dialects()
