"""Scenario-style integration tests for core extraction behaviors."""

from __future__ import annotations

from mongo_schema_extractor.configuration.runtime_settings import ExtractionSettings
from mongo_schema_extractor.document_store import InMemoryDocumentStore
from mongo_schema_extractor.schema_inference import SchemaInferrer
from mongo_schema_extractor.schema_management import (
    FieldSchema,
    flatten_schema,
    schema_to_document,
)


class _SilentLogger:
    def info(self, msg: str) -> None:
        pass

    def error(self, msg: str) -> None:
        pass


def _generate(collections, **settings):
    inferrer = SchemaInferrer(
        InMemoryDocumentStore(collections), ExtractionSettings(**settings), _SilentLogger()
    )
    return inferrer.generate_schema_for_all_collections()


def test_users_collection_end_to_end() -> None:
    schema = _generate(
        {"users": [{"name": "Al", "age": 30}, {"name": "Bo", "address": {"city": "NY"}}]}
    )

    assert schema_to_document(schema) == {
        "users": [
            {
                "name": "address",
                "types": ["object"],
                "subFields": [{"name": "city", "types": ["string"]}],
            },
            {"name": "age", "types": ["number"]},
            {"name": "name", "types": ["string"]},
        ]
    }
    assert flatten_schema(schema) == {
        "users": {
            "name": "string",
            "age": "number",
            "address": "object",
            "address.city": "string",
        }
    }


def test_array_first_element_policy_end_to_end() -> None:
    schema = _generate({"docs": [{"wrapper": {"items": [{"a": 1}, "x", "y"]}}]})

    (wrapper,) = schema["docs"]
    assert wrapper.sub_fields == (
        FieldSchema(
            name="items",
            types=("array",),
            sub_fields=(FieldSchema(name="a", types=("number",)),),
        ),
    )
    assert flatten_schema(schema)["docs"] == {
        "wrapper": "object",
        "wrapper.items": "array",
        "wrapper.items.a": "number",
    }


def test_version_key_is_excluded_wherever_it_appears() -> None:
    schema = _generate(
        {
            "posts": [
                {
                    "__v": 1,
                    "name": "first",
                    "author": {"__v": 2, "name": "Al"},
                    "comments": [{"__v": 0, "body": "hi"}],
                }
            ]
        },
        filtered_fields=("__v",),
    )

    flattened = flatten_schema(schema, ["__v"])["posts"]

    assert "name" in flattened
    assert not any("__v" in path for path in flattened)
    assert flattened == {
        "name": "string",
        "author": "object",
        "author.name": "string",
        "comments": "array",
        "comments.body": "string",
    }


def test_mixed_top_level_types_report_object_only() -> None:
    schema = _generate(
        {"events": [{"payload": {"id": 1}}, {"payload": "raw"}, {"payload": [1, 2]}]}
    )

    (payload,) = schema["events"]
    assert payload.types == ("object",)
    assert flatten_schema(schema)["events"] == {"payload": "object", "payload.id": "number"}


def test_heterogeneous_sub_documents_merge_in_flattened_view() -> None:
    schema = _generate(
        {
            "users": [
                {"address": {"city": "NY"}},
                {"address": {"city": None, "zip": "10001"}},
            ]
        }
    )

    (address,) = schema["users"]
    assert [field.name for field in address.sub_fields or ()] == ["city", "city", "zip"]
    assert flatten_schema(schema)["users"] == {
        "address": "object",
        "address.city": "null",
        "address.zip": "string",
    }


def test_deeply_nested_documents_stop_at_depth_ceiling() -> None:
    document: dict = {"leaf": 1}
    for _ in range(10):
        document = {"n": document}

    schema = _generate({"deep": [document]}, max_depth=3)

    flattened = flatten_schema(schema)["deep"]
    assert list(flattened) == ["n", "n.n", "n.n.n", "n.n.n.n"]
    assert schema_to_document(schema)["deep"][0]["subFields"][0]["subFields"][0]["subFields"] == [
        {"name": "n", "types": ["object"], "truncated": True}
    ]
