"""Tests for insomnia_sync.parser.extractor."""

from __future__ import annotations

import datetime
from typing import Any

import pytest

from insomnia_sync.models import ParameterLocation
from insomnia_sync.parser.extractor import extract_document


def _doc(paths: dict[str, Any], **extra: Any) -> dict[str, Any]:
    return {"openapi": "3.0.0", "info": {"title": "T", "version": "1"}, "paths": paths, **extra}


# ---------------------------------------------------------------------------
# Info, servers, tags
# ---------------------------------------------------------------------------


class TestInfo:
    def test_petstore_info(self, petstore_tree: dict[str, Any]) -> None:
        document = extract_document(petstore_tree)
        assert document.spec_version == "3.0.3"
        assert document.info.title == "Petstore API"
        assert document.info.version == "1.0.0"
        assert document.info.contact is not None
        assert document.info.contact.email == "support@petstore.example.com"

    def test_missing_info_becomes_empty_text(self) -> None:
        document = extract_document({"openapi": "3.0.0", "paths": {}})
        assert document.info.title == ""
        assert document.info.version == ""

    def test_numeric_and_date_versions_become_text(self) -> None:
        document = extract_document(
            {"swagger": 2.0, "info": {"title": "T", "version": datetime.date(2024, 1, 31)}}
        )
        assert document.spec_version == "2.0"
        assert document.info.version == "2024-01-31"


class TestServers:
    def test_declaration_order(self, petstore_tree: dict[str, Any]) -> None:
        document = extract_document(petstore_tree)
        assert [s.url for s in document.servers] == [
            "https://api.petstore.example.com/v1",
            "http://localhost:8080",
        ]

    def test_entries_without_url_skipped(self) -> None:
        document = extract_document(_doc({}, servers=[{"description": "x"}, {"url": "/v1"}, "junk"]))
        assert [s.url for s in document.servers] == ["/v1"]

    def test_swagger_servers_synthesised(self, swagger_tree: dict[str, Any]) -> None:
        document = extract_document(swagger_tree)
        assert [s.url for s in document.servers] == [
            "https://legacy.example.com/api",
            "http://legacy.example.com/api",
        ]

    def test_swagger_without_schemes_defaults_to_http(self) -> None:
        document = extract_document({"swagger": "2.0", "host": "h.example.com"})
        assert [s.url for s in document.servers] == ["http://h.example.com"]

    def test_no_servers(self) -> None:
        assert extract_document(_doc({})).servers == []


class TestTags:
    def test_registry(self, petstore_tree: dict[str, Any]) -> None:
        document = extract_document(petstore_tree)
        assert document.tag_description("pets") == "Everything about your pets"
        assert document.tag_description("store") is None
        assert document.tag_description("unknown") is None


# ---------------------------------------------------------------------------
# Paths and operations
# ---------------------------------------------------------------------------


class TestPaths:
    def test_every_operation_extracted(self, petstore_tree: dict[str, Any]) -> None:
        document = extract_document(petstore_tree)
        assert len(document.operations()) == 6

    def test_processing_order(self, petstore_tree: dict[str, Any]) -> None:
        document = extract_document(petstore_tree)
        pairs = [(op.path, op.method) for op in document.operations()]
        assert pairs == [
            ("/health", "get"),
            ("/pets", "get"),
            ("/pets", "post"),
            ("/pets/{petId}", "get"),
            ("/pets/{petId}", "delete"),
            ("/store/inventory", "get"),
        ]

    def test_canonical_method_order_regardless_of_source_order(self) -> None:
        document = extract_document(
            _doc({"/x": {"trace": {}, "patch": {}, "post": {}, "get": {}, "delete": {}}})
        )
        assert list(document.paths["/x"]) == ["get", "post", "delete", "patch", "trace"]

    def test_non_operation_keys_skipped(self) -> None:
        document = extract_document(
            _doc({
                "/x": {
                    "summary": "path summary",
                    "description": "d",
                    "servers": [],
                    "parameters": [],
                    "x-internal": {"a": 1},
                    "get": {},
                }
            })
        )
        assert list(document.paths["/x"]) == ["get"]

    def test_unknown_method_keys_kept_after_canonical(self) -> None:
        document = extract_document(_doc({"/x": {"query": {}, "get": {}}}))
        assert list(document.paths["/x"]) == ["get", "query"]

    def test_non_mapping_operations_skipped(self) -> None:
        document = extract_document(_doc({"/x": {"get": "nope"}, "/y": None}))
        assert document.paths == {}

    def test_path_item_ref(self) -> None:
        tree = _doc(
            {"/x": {"$ref": "#/x-shared/item"}},
            **{"x-shared": {"item": {"get": {"summary": "shared"}}}},
        )
        document = extract_document(tree)
        assert document.paths["/x"]["get"].summary == "shared"

    def test_summary_and_tags(self, petstore_tree: dict[str, Any]) -> None:
        document = extract_document(petstore_tree)
        inventory = document.paths["/store/inventory"]["get"]
        assert inventory.summary == "Returns pet inventories"
        assert inventory.tags == ["store", "pets"]
        assert inventory.folder_name == "store"

    def test_untagged_operation_uses_default_folder(self, petstore_tree: dict[str, Any]) -> None:
        document = extract_document(petstore_tree)
        assert document.paths["/health"]["get"].folder_name == "default"

    def test_display_name_without_summary(self, petstore_tree: dict[str, Any]) -> None:
        document = extract_document(petstore_tree)
        op = document.paths["/pets/{petId}"]["get"]
        assert op.summary is None
        assert op.display_name == "GET /pets/{petId}"
        assert op.description == "Returns a single pet."


class TestParameters:
    def test_path_level_ref_parameter_merged(self, petstore_tree: dict[str, Any]) -> None:
        document = extract_document(petstore_tree)
        op = document.paths["/pets/{petId}"]["delete"]
        assert [(p.name, p.location) for p in op.parameters] == [
            ("petId", ParameterLocation.PATH)
        ]

    def test_operation_parameter_overrides_path_parameter(self) -> None:
        document = extract_document(
            _doc({
                "/x/{id}": {
                    "parameters": [{"name": "id", "in": "path"}, {"name": "v", "in": "header"}],
                    "get": {"parameters": [{"name": "id", "in": "path", "description": "op"}]},
                }
            })
        )
        params = document.paths["/x/{id}"]["get"].parameters
        assert [(p.name, p.location.value) for p in params] == [("v", "header"), ("id", "path")]

    def test_invalid_parameters_skipped(self) -> None:
        document = extract_document(
            _doc({
                "/x": {
                    "get": {
                        "parameters": [
                            {"in": "query"},
                            {"name": "a", "in": "nowhere"},
                            {"$ref": "#/components/parameters/Missing"},
                            {"name": "ok", "in": "query"},
                        ]
                    }
                }
            })
        )
        assert [p.name for p in document.paths["/x"]["get"].parameters] == ["ok"]

    @pytest.mark.parametrize("location", ["body", "formData", "cookie"])
    def test_swagger_and_cookie_locations(self, location: str) -> None:
        document = extract_document(
            _doc({"/x": {"post": {"parameters": [{"name": "p", "in": location}]}}})
        )
        assert document.paths["/x"]["post"].parameters[0].location.value == location

    def test_tree_left_untouched(self, petstore_tree: dict[str, Any]) -> None:
        before = repr(petstore_tree)
        extract_document(petstore_tree)
        assert repr(petstore_tree) == before
