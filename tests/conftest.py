from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from jsonschema import Draft6Validator

from modelschema.metadata import (
    ArrayType,
    ModelDescriptor,
    ModelRef,
    PropertyDescriptor,
    ScalarType,
    belongs_to,
    has_many,
)
from modelschema.registry import ModelRegistry

TESTS_DATA_DIR: Path = Path(__file__).parent / "data"


@pytest.fixture(scope="module")
def data_dir() -> Path:
    assert TESTS_DATA_DIR.exists(), f"Missing test data folder: {TESTS_DATA_DIR}"
    return TESTS_DATA_DIR


@pytest.fixture
def assert_valid_draft6() -> Callable[[dict[str, Any]], None]:
    """Fail if the document is not a valid JSON Schema Draft-06 document."""

    def check(schema: dict[str, Any]) -> None:
        Draft6Validator.check_schema(schema)

    return check


@pytest.fixture
def circular_catalog() -> ModelDescriptor:
    """Category with an array of Product; Product referencing back to Category."""
    registry = ModelRegistry()
    category = registry.register(
        ModelDescriptor(
            name="Category",
            properties=[PropertyDescriptor("products", ArrayType(ModelRef(registry.ref("Product"))))],
        )
    )
    registry.register(
        ModelDescriptor(
            name="Product",
            properties=[PropertyDescriptor("category", ModelRef(registry.ref("Category")))],
        )
    )
    return category


@pytest.fixture
def related_catalog() -> ModelDescriptor:
    """Category has-many Product, Product belongs-to Category via categoryId."""

    def get_product() -> ModelDescriptor:
        return product

    def get_category() -> ModelDescriptor:
        return category

    product = ModelDescriptor(
        name="Product",
        properties=[PropertyDescriptor("id", ScalarType("number"), id=True)],
        relations=[belongs_to(get_category, foreign_key="categoryId")],
    )
    category = ModelDescriptor(
        name="Category",
        properties=[PropertyDescriptor("id", ScalarType("number"), id=True)],
        relations=[has_many(get_product, name="products", foreign_key="categoryId")],
    )
    return category
