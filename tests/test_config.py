from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from xogen.codegen.core.config import (
    EXAMPLE_CONFIG,
    ConfigError,
    ConfigManager,
    GeneratorConfig,
    load_config,
)
from xogen.codegen.core.schema import MethodsConfig


class ConfigManagerTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.manager = ConfigManager()

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def write(self, name: str, content: str) -> Path:
        path = self.tmp / name
        path.write_text(content, encoding="utf-8")
        return path

    def test_defaults(self) -> None:
        config = self.manager.get_config()
        self.assertEqual(config.dialect, "postgres")
        self.assertEqual(config.name_conflict_suffix, "Val")
        self.assertEqual(config.wrapper_type_map["sql.NullInt64"], "Int64Value")
        self.assertFalse(config.strict_nullable_mapping)
        self.assertIsInstance(config.methods, MethodsConfig)

    def test_load_file(self) -> None:
        path = self.write("xogen.json", json.dumps(EXAMPLE_CONFIG))
        config = self.manager.get_config(config_file=path)

        self.assertEqual(config.dialect, "mysql")
        self.assertEqual(config.custom_type_package, "models")
        self.assertTrue(config.escape_column_names)
        tables = config.methods.model_to_pb["public-story"]
        self.assertEqual(tables[0].name, "story")
        self.assertEqual(tables[0].skips, ["deleted_at"])

    def test_overrides_take_precedence(self) -> None:
        path = self.write("xogen.json", json.dumps({"dialect": "mysql"}))
        config = self.manager.get_config({"dialect": "oracle"}, path)
        self.assertEqual(config.dialect, "oracle")

    def test_collection_fields_are_normalized(self) -> None:
        config = self.manager.get_config(
            {
                "known_types": ["int", "string"],
                "nullable_time_types": ["sql.NullTime"],
            }
        )
        self.assertEqual(config.known_types, frozenset({"int", "string"}))
        self.assertEqual(config.nullable_time_types, ("sql.NullTime",))

    def test_unknown_keys_go_to_custom(self) -> None:
        config = self.manager.get_config({"output_dir": "models"})
        self.assertEqual(config.custom, {"output_dir": "models"})

    def test_set_default(self) -> None:
        self.manager.set_default("dialect", "sqlite3")
        self.assertEqual(self.manager.get_config().dialect, "sqlite3")

    def test_file_errors(self) -> None:
        with self.assertRaises(ConfigError):
            self.manager.get_config(config_file=self.tmp / "missing.json")
        with self.assertRaises(ConfigError):
            self.manager.get_config(config_file=self.write("xogen.yaml", "dialect: mysql"))
        with self.assertRaises(ConfigError):
            self.manager.get_config(config_file=self.write("bad.json", "{not json"))
        with self.assertRaises(ConfigError):
            self.manager.get_config(config_file=self.write("list.json", "[1, 2]"))

    def test_malformed_methods_section(self) -> None:
        samples = [
            {"model_to_pb": {"svc": ["story"]}},
            {"model_to_pb": {"svc": [{"skips": ["id"]}]}},
            {"model_to_pb": {"svc": [{"name": "story", "skips": "id"}]}},
            {"model_to_pb": {"svc": "story"}},
        ]
        for methods in samples:
            with self.subTest(methods=methods):
                with self.assertRaises(ConfigError) as ctx:
                    load_config({"methods": methods})
                self.assertIn("svc", str(ctx.exception))

        with self.assertRaises(ConfigError):
            load_config({"methods": {"model_to_pb": ["svc"]}})
        with self.assertRaises(ConfigError):
            load_config({"methods": "story"})

    def test_save_and_reload(self) -> None:
        original = self.manager.get_config(dict(EXAMPLE_CONFIG, output_dir="gen"))
        path = self.tmp / "saved.json"
        self.manager.save_config(original, path)

        reloaded = self.manager.get_config(config_file=path)
        self.assertEqual(reloaded.dialect, original.dialect)
        self.assertEqual(reloaded.known_types, original.known_types)
        self.assertEqual(reloaded.nullable_time_types, original.nullable_time_types)
        self.assertEqual(reloaded.methods, original.methods)
        self.assertEqual(reloaded.custom, {"output_dir": "gen"})

    def test_validate_config(self) -> None:
        self.assertEqual(self.manager.validate_config(GeneratorConfig()), [])

        config = GeneratorConfig(
            wrapper_type_map={"pgtype.Int8": "Int64"},
            name_conflict_suffix="",
            custom_type_package="my-models",
        )
        warnings = self.manager.validate_config(config)
        self.assertEqual(len(warnings), 4)
