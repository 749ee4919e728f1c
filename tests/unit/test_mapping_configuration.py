"""
Tests for ColumnMapping, MappingConfiguration and its builder.
"""

import unittest

from table_unify.exceptions import SchemaError
from table_unify.models import ColumnMapping, MappingConfiguration, MappingOptions


class TestColumnMapping(unittest.TestCase):
    """Test selector validation."""

    def test_name_selector(self):
        mapping = ColumnMapping("name", "string", source_column_name="Name")
        self.assertTrue(mapping.uses_source_column_name())
        self.assertFalse(mapping.uses_source_column_index())

    def test_index_selector(self):
        mapping = ColumnMapping("name", "string", source_column_index=0)
        self.assertTrue(mapping.uses_source_column_index())
        self.assertFalse(mapping.uses_source_column_name())

    def test_exactly_one_selector_required(self):
        with self.assertRaises(SchemaError):
            ColumnMapping("name", "string")
        with self.assertRaises(SchemaError):
            ColumnMapping("name", "string", source_column_name="Name", source_column_index=0)

    def test_invalid_index(self):
        with self.assertRaises(SchemaError):
            ColumnMapping("name", "string", source_column_index=-1)
        with self.assertRaises(SchemaError):
            ColumnMapping("name", "string", source_column_index=True)
        with self.assertRaises(SchemaError):
            ColumnMapping("name", "string", source_column_index="0")

    def test_blank_target_rejected(self):
        with self.assertRaises(SchemaError):
            ColumnMapping(" ", "string", source_column_name="Name")

    def test_type_alias_normalized(self):
        mapping = ColumnMapping("age", "Integer", source_column_name="age")
        self.assertEqual(mapping.target_column_type, "int")

    def test_unknown_type_rejected(self):
        with self.assertRaises(SchemaError):
            ColumnMapping("age", "number", source_column_name="age")

    def test_from_dict_requires_target(self):
        with self.assertRaises(SchemaError):
            ColumnMapping.from_dict({"sourceColumnName": "a", "targetColumnType": "string"})

    def test_dict_shape(self):
        mapping = ColumnMapping("age", "int", source_column_index=2, default_value="0")
        self.assertEqual(mapping.to_dict(), {
            "sourceColumnIndex": 2,
            "targetColumnName": "age",
            "targetColumnType": "int",
            "defaultValue": "0",
        })
        self.assertEqual(ColumnMapping.from_dict(mapping.to_dict()), mapping)


class TestMappingConfiguration(unittest.TestCase):
    """Test configuration behavior and the builder."""

    def test_column_definitions_in_mapping_order(self):
        config = (MappingConfiguration.builder()
                  .map_column("b", "B", "string")
                  .map_column("a", "A", "int")
                  .build())
        self.assertEqual(list(config.create_column_definitions().items()), [("B", "string"), ("A", "int")])

    def test_later_mapping_for_same_target_wins(self):
        config = (MappingConfiguration.builder()
                  .map_column("first", "value", "string")
                  .map_column("other", "other", "string")
                  .map_column("second", "value", "int")
                  .build())
        definitions = config.create_column_definitions()
        self.assertEqual(list(definitions), ["value", "other"])
        self.assertEqual(definitions["value"], "int")

    def test_builder_selects_by_argument_type(self):
        config = (MappingConfiguration.builder()
                  .map_column(0, "first", "string")
                  .map_column("Name", "name", "string")
                  .build())
        self.assertEqual(config.column_mappings[0].source_column_index, 0)
        self.assertEqual(config.column_mappings[1].source_column_name, "Name")

    def test_configuration_is_immutable(self):
        config = MappingConfiguration.builder().set_option(MappingOptions.HAS_HEADER_ROW, True).build()
        with self.assertRaises(TypeError):
            config.options["hasHeaderRow"] = False
        with self.assertRaises(Exception):
            config.source_location = "elsewhere"

    def test_with_source_location_copies(self):
        config = MappingConfiguration.builder().set_source_location("a.csv").build()
        moved = config.with_source_location("b.csv")
        self.assertEqual(config.source_location, "a.csv")
        self.assertEqual(moved.source_location, "b.csv")

    def test_bool_option_accepts_strings(self):
        config = (MappingConfiguration.builder()
                  .set_options({"hasHeaderRow": "true", "prettyPrint": "no", "createTable": 1})
                  .build())
        self.assertTrue(config.get_bool_option("hasHeaderRow"))
        self.assertFalse(config.get_bool_option("prettyPrint", True))
        self.assertTrue(config.get_bool_option("createTable"))
        self.assertTrue(config.get_bool_option("missing", True))
        self.assertEqual(config.get_option("missing", "x"), "x")

    def test_dict_round_trip(self):
        config = (MappingConfiguration.builder()
                  .set_source_location("employees.csv")
                  .set_option("hasHeaderRow", True)
                  .map_column("Name", "name", "string")
                  .map_column(1, "age", "int", default_value="18")
                  .build())
        self.assertEqual(MappingConfiguration.from_dict(config.to_dict()), config)

    def test_from_dict_rejects_non_mapping(self):
        with self.assertRaises(SchemaError):
            MappingConfiguration.from_dict(["not", "a", "dict"])

    def test_builder_rejects_null_mapping(self):
        with self.assertRaises(SchemaError):
            MappingConfiguration.builder().add_column_mapping(None)


if __name__ == '__main__':
    unittest.main()
