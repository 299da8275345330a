"""Tests for loading model descriptors from GraphQL SDL."""

from pathlib import Path

import pytest
from graphql import GraphQLError

from modelschema.errors import InvalidModelError, UnresolvedRelationError, UnsupportedTypeError
from modelschema.exporters.jsonschema import JsonSchemaOptions, model_to_json_schema
from modelschema.loaders.sdl import load_models, load_models_from_sdl
from modelschema.metadata import ArrayType, ModelRef, RelationType, ScalarType


class TestModelExtraction:
    def test_object_types_become_models(self) -> None:
        registry = load_models_from_sdl("""
            type Query { vehicle: Vehicle }
            type Vehicle { vin: String, year: Int }
            type Engine { power: Float }
        """)

        assert set(registry.names()) == {"Vehicle", "Engine"}
        assert "Query" not in registry

    def test_field_types(self) -> None:
        registry = load_models_from_sdl("""
            enum Fuel { PETROL DIESEL }
            type Engine { power: Float }
            type Vehicle {
                vin: ID!
                year: Int
                electric: Boolean
                fuel: Fuel
                engines: [Engine!]!
                tags: [String]
                engine: Engine
            }
        """)

        properties = registry.get("Vehicle").declared_properties()

        assert properties["vin"].type == ScalarType("string")
        assert properties["vin"].required is True
        assert properties["year"].type == ScalarType("integer")
        assert properties["year"].required is False
        assert properties["electric"].type == ScalarType("boolean")
        assert properties["fuel"].type == ScalarType("string", enum=("PETROL", "DIESEL"))
        assert properties["tags"].type == ArrayType(ScalarType("string"))
        assert isinstance(properties["engine"].type, ModelRef)
        assert properties["engine"].type.resolve() is registry.get("Engine")
        engines_type = properties["engines"].type
        assert isinstance(engines_type, ArrayType)
        assert isinstance(engines_type.items, ModelRef)

    def test_relation_directives(self) -> None:
        registry = load_models_from_sdl("""
            type Category {
                id: Float @id
                products: [Product] @hasMany(foreignKey: "categoryId")
            }
            type Product {
                id: Float @id
                categoryId: Float @belongsTo(model: "Category")
            }
        """)

        category = registry.get("Category")
        product = registry.get("Product")

        assert list(category.declared_properties()) == ["id"]
        assert category.identifier_property() is not None
        (has_many,) = category.relations
        assert has_many.type == RelationType.HAS_MANY
        assert has_many.name == "products"
        assert has_many.foreign_key == "categoryId"
        assert has_many.resolve_target() is product

        (belongs_to,) = product.relations
        assert belongs_to.type == RelationType.BELONGS_TO
        assert belongs_to.name == "category"
        assert belongs_to.resolve_target() is category

    def test_declared_directives_are_kept(self) -> None:
        registry = load_models_from_sdl("""
            directive @id on FIELD_DEFINITION
            type Tag { id: Int @id, label: String }
        """)

        assert registry.get("Tag").identifier_property() is not None

    def test_descriptions(self) -> None:
        registry = load_models_from_sdl('''
            """A vehicle"""
            type Vehicle {
                "Vehicle identification number"
                vin: String
            }
        ''')

        vehicle = registry.get("Vehicle")

        assert vehicle.description == "A vehicle"
        assert vehicle.declared_properties()["vin"].description == "Vehicle identification number"


class TestSdlErrors:
    def test_union_field_is_unsupported(self) -> None:
        with pytest.raises(UnsupportedTypeError, match="Garage.parked"):
            load_models_from_sdl("""
                type Car { vin: String }
                type Bike { frame: String }
                union Parked = Car | Bike
                type Garage { parked: Parked }
            """)

    def test_has_many_requires_list_of_objects(self) -> None:
        with pytest.raises(InvalidModelError, match="@hasMany field 'owner'"):
            load_models_from_sdl("""
                type Person { name: String }
                type Pet { owner: Person @hasMany(foreignKey: "petId") }
            """)

    def test_belongs_to_without_id_suffix_requires_name(self) -> None:
        with pytest.raises(InvalidModelError, match="Invalid model 'Pet': .*foreign key 'owner'"):
            load_models_from_sdl("""
                type User { id: Int @id }
                type Pet { owner: Int @belongsTo(model: "User") }
            """)

    def test_belongs_to_explicit_name(self) -> None:
        registry = load_models_from_sdl("""
            type User { id: Int @id }
            type Pet { owner: Int @belongsTo(model: "User", name: "keeper") }
        """)

        (relation,) = registry.get("Pet").relations
        assert relation.name == "keeper"

    def test_belongs_to_unknown_model_fails_on_conversion(self) -> None:
        registry = load_models_from_sdl("""
            type Product { id: Float @id, shelfId: Float @belongsTo(model: "Shelf") }
        """)

        with pytest.raises(UnresolvedRelationError, match="'Shelf'"):
            model_to_json_schema(registry.get("Product"), JsonSchemaOptions(include_relations=True))

    def test_invalid_sdl(self) -> None:
        with pytest.raises(GraphQLError):
            load_models_from_sdl("type Broken {")


class TestSdlToJsonSchema:
    def test_shop_models(self, data_dir: Path) -> None:
        registry = load_models(data_dir / "shop.graphql")

        schema = model_to_json_schema(registry.get("Category"), JsonSchemaOptions(include_relations=True))

        assert schema == {
            "title": "CategoryWithRelations",
            "description": "A product category",
            "properties": {
                "id": {"type": "number"},
                "products": {
                    "type": "array",
                    "items": {"$ref": "#/definitions/ProductWithRelations"},
                },
            },
            "definitions": {
                "ProductWithRelations": {
                    "title": "ProductWithRelations",
                    "properties": {
                        "id": {"type": "number"},
                        "categoryId": {"type": "number"},
                        "category": {"$ref": "#/definitions/CategoryWithRelations"},
                    },
                },
            },
        }

    def test_library_directory(self, data_dir: Path) -> None:
        registry = load_models(data_dir / "library")

        schema = model_to_json_schema(registry.get("Book"), JsonSchemaOptions(include_relations=True))

        assert schema["required"] == ["isbn", "title", "writerId"]
        assert schema["properties"]["formats"] == {
            "type": "array",
            "items": {"type": "string", "enum": ["HARDCOVER", "PAPERBACK", "EBOOK"]},
        }
        assert schema["properties"]["publishedOn"] == {"type": "string", "format": "date-time"}
        assert schema["properties"]["writer"] == {"$ref": "#/definitions/AuthorWithRelations"}

        author = schema["definitions"]["AuthorWithRelations"]
        assert author["required"] == ["id", "name"]
        assert author["properties"]["name"] == {"type": "string", "description": "Full name of the author"}
        assert author["properties"]["books"] == {"type": "array", "items": {"$ref": "#/definitions/BookWithRelations"}}

    def test_unknown_custom_scalar(self) -> None:
        registry = load_models_from_sdl("""
            scalar Uuid
            type Token { value: Uuid }
        """)

        with pytest.raises(UnsupportedTypeError, match="'uuid'"):
            model_to_json_schema(registry.get("Token"))
