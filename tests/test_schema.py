from __future__ import annotations

import unittest

from xogen.codegen.core.generator import SchemaError, UnknownKindError
from xogen.codegen.core.schema import (
    Column,
    Field,
    Index,
    MethodsConfig,
    MethodsOption,
    ModelToPBConfig,
    RelType,
    TableConfig,
    TemplateType,
    Type,
)
from tests.helpers import make_field, story_type, user_type


class KindTests(unittest.TestCase):
    def test_rel_type_parse(self) -> None:
        self.assertIs(RelType.parse("table"), RelType.TABLE)
        self.assertIs(RelType.parse("VIEW"), RelType.VIEW)
        self.assertIs(RelType.parse(RelType.VIEW), RelType.VIEW)
        self.assertEqual(str(RelType.TABLE), "TABLE")

    def test_rel_type_unknown(self) -> None:
        with self.assertRaises(UnknownKindError) as ctx:
            RelType.parse("matview")
        self.assertEqual(ctx.exception.kind, "relation kind")
        self.assertEqual(ctx.exception.value, "matview")

        with self.assertRaises(UnknownKindError):
            RelType.parse(3)  # type: ignore[arg-type]

    def test_template_type_order_and_names(self) -> None:
        ordered = sorted(TemplateType, key=lambda t: t.value)
        self.assertIs(ordered[0], TemplateType.ENUM)
        self.assertIs(ordered[-1], TemplateType.XO)

        self.assertEqual(TemplateType.FOREIGN_KEY.template_name, "foreignkey")
        self.assertEqual(TemplateType.QUERY_TYPE.template_name, "querytype")
        self.assertEqual(TemplateType.TYPE_PROTO.template_name, "type")
        self.assertEqual(str(TemplateType.XO), "xo_db")

    def test_template_type_parse(self) -> None:
        self.assertIs(TemplateType.parse("foreign-key"), TemplateType.FOREIGN_KEY)
        self.assertIs(TemplateType.parse("type_proto"), TemplateType.TYPE_PROTO)
        with self.assertRaises(UnknownKindError) as ctx:
            TemplateType.parse("sequence")
        self.assertEqual(ctx.exception.kind, "template kind")


class FieldTests(unittest.TestCase):
    def test_nullability_follows_column(self) -> None:
        self.assertFalse(Field("Name", "string").is_nullable)
        self.assertFalse(make_field("Name", "string").is_nullable)
        self.assertTrue(make_field("Email", "sql.NullString", not_null=False).is_nullable)

    def test_column_name(self) -> None:
        self.assertEqual(make_field("CreatedAt", "time.Time").column_name, "created_at")
        self.assertEqual(Field("v", "int").column_name, "")


class TypeValidationTests(unittest.TestCase):
    def test_valid_type(self) -> None:
        typ = user_type()
        typ.indexes["users_email_idx"] = Index("UserByEmail", typ, [typ.fields[2]])
        typ.validate()
        self.assertIs(typ.get_field("Email"), typ.fields[2])
        self.assertIsNone(typ.get_field("Missing"))

    def test_duplicate_field_name(self) -> None:
        typ = user_type()
        typ.fields.append(make_field("Name", "string", "name2"))
        with self.assertRaises(SchemaError):
            typ.validate()

    def test_primary_key_field_must_be_member(self) -> None:
        typ = user_type()
        typ.primary_key_fields = [make_field("ID", "int64", "id")]
        with self.assertRaises(SchemaError):
            typ.validate()

    def test_index_field_must_be_member(self) -> None:
        typ = user_type()
        stray = Field("Other", "string", col=Column("other"))
        typ.indexes["stray_idx"] = Index("UserByOther", typ, [stray])
        with self.assertRaises(SchemaError):
            typ.validate()


class MethodsConfigTests(unittest.TestCase):
    def test_skipped_fields_match_column_names(self) -> None:
        typ = story_type()
        option = MethodsOption(
            typ, model_to_pb=True,
            model_to_pb_config=ModelToPBConfig("svc", frozenset({"title"})),
        )
        self.assertTrue(option.is_skipped(typ.fields[1]))
        self.assertFalse(option.is_skipped(typ.fields[0]))
        self.assertFalse(MethodsOption(typ).is_skipped(typ.fields[1]))

    def test_from_dict(self) -> None:
        config = MethodsConfig.from_dict(
            {
                "list_fields": ["User"],
                "model_to_pb": {
                    "public-story": [{"name": "story", "skips": ["deleted_at"]}],
                    "accounts": [TableConfig("User")],
                },
            }
        )
        self.assertEqual(config.list_fields, ["User"])
        self.assertEqual(config.model_to_pb["public-story"][0].skips, ["deleted_at"])
        self.assertEqual(config.model_to_pb["accounts"][0].name, "User")
        self.assertEqual(MethodsConfig.from_dict(None).model_to_pb, {})

    def test_build_options(self) -> None:
        config = MethodsConfig.from_dict(
            {
                "list_fields": ["User"],
                "model_to_pb": {
                    "public-story": [{"name": "story", "skips": ["deleted_at"]}],
                    "accounts": [{"name": "User"}],
                },
            }
        )
        tag = Type("Tag", fields=[make_field("ID", "int64", "id")])
        options = config.build_options([user_type(), story_type(), tag])

        self.assertEqual([o.type.name for o in options], ["User", "Story", "Tag"])

        user, story, plain = options
        self.assertTrue(user.list_fields)
        self.assertEqual(user.sub, "accounts")
        self.assertTrue(user.model_to_pb)

        self.assertFalse(story.list_fields)
        self.assertEqual(story.sub, "public-story")
        self.assertEqual(story.model_to_pb_config.import_service, "public-story")
        self.assertEqual(story.model_to_pb_config.skip_fields, frozenset({"deleted_at"}))

        self.assertEqual(plain.sub, "")
        self.assertFalse(plain.model_to_pb)
        self.assertIsNone(plain.model_to_pb_config)
