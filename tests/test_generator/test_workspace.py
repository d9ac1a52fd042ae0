"""Tests for insomnia_sync.generator.workspace."""

from __future__ import annotations

import os
import stat
import sys
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
import yaml

from insomnia_sync.exceptions import (
    AssemblyError,
    OutputWriteError,
    SourceNotFoundError,
    SpecParseError,
)
from insomnia_sync.generator import convert_file, generate_workspace, render_source
from insomnia_sync.generator.context import GenerationContext

EPOCH = 1_700_000_000_000


# ---------------------------------------------------------------------------
# Assembly
# ---------------------------------------------------------------------------


class TestGenerateWorkspace:
    def test_name_and_type(self, petstore_tree: dict[str, Any], ctx: GenerationContext) -> None:
        workspace = generate_workspace(petstore_tree, ctx)
        assert workspace.name == "Petstore API 1.0.0"
        assert workspace.type == "spec.insomnia.rest/5.0"

    def test_timestamps(self, petstore_tree: dict[str, Any], ctx: GenerationContext) -> None:
        workspace = generate_workspace(petstore_tree, ctx)
        assert (workspace.meta.created, workspace.meta.modified) == (EPOCH, EPOCH - 1)
        assert (workspace.spec.meta.created, workspace.spec.meta.modified) == (EPOCH + 3, EPOCH + 4)
        assert workspace.cookie_jar.meta.created == workspace.cookie_jar.meta.modified == EPOCH - 5
        assert workspace.cookie_jar.name == "Default Jar"

    def test_id_prefixes(self, petstore_tree: dict[str, Any], ctx: GenerationContext) -> None:
        workspace = generate_workspace(petstore_tree, ctx)
        assert workspace.meta.id.startswith("wrk_")
        assert workspace.spec.meta.id.startswith("spc_")
        assert workspace.cookie_jar.meta.id.startswith("jar_")

    def test_all_ids_distinct(self, petstore_tree: dict[str, Any]) -> None:
        workspace = generate_workspace(petstore_tree)
        ids = [workspace.meta.id, workspace.spec.meta.id, workspace.cookie_jar.meta.id]
        ids.append(workspace.environments.meta.id)
        ids.extend(s.meta.id for s in workspace.environments.sub_environments)
        for folder in workspace.collection:
            ids.append(folder.meta.id)
            ids.extend(r.meta.id for r in folder.children)
        assert len(ids) == len(set(ids))

    def test_spec_contents_is_the_tree(
        self, petstore_tree: dict[str, Any], ctx: GenerationContext
    ) -> None:
        workspace = generate_workspace(petstore_tree, ctx)
        assert workspace.spec.contents == petstore_tree

    def test_request_count(self, petstore_tree: dict[str, Any], ctx: GenerationContext) -> None:
        assert generate_workspace(petstore_tree, ctx).request_count() == 6

    def test_swagger_document(self, swagger_tree: dict[str, Any], ctx: GenerationContext) -> None:
        workspace = generate_workspace(swagger_tree, ctx)
        assert workspace.name == "Legacy Users 2.1"
        users = workspace.collection[0]
        assert users.name == "users"
        assert [(r.method, r.name, r.url) for r in users.children] == [
            ("GET", "GET /users/{userId}", "{{ _.base_url }}/users/{{ _.userId }}"),
            ("PUT", "Replace a user", "{{ _.base_url }}/users/{{ _.userId }}"),
        ]

    def test_name_uses_whatever_info_is_present(self, ctx: GenerationContext) -> None:
        workspace = generate_workspace({"openapi": "3.0.0", "info": {"title": "T"}}, ctx)
        assert workspace.name == "T "

    def test_assembly_failure_wrapped(self, ctx: GenerationContext) -> None:
        with patch(
            "insomnia_sync.generator.workspace.build_collection",
            side_effect=ValueError("boom"),
        ):
            with pytest.raises(AssemblyError, match="boom") as exc_info:
                generate_workspace({"openapi": "3.0.0"}, ctx)
        assert exc_info.value.stage == "assemble"


# ---------------------------------------------------------------------------
# End-to-end conversion
# ---------------------------------------------------------------------------


class TestConvertFile:
    def test_writes_workspace(self, spec_file: Path, tmp_path: Path) -> None:
        output = tmp_path / "out" / "petstore-insomnia.yml"
        result = convert_file(spec_file, output)

        assert output.is_file()
        assert result.source == spec_file
        assert result.output == output
        assert result.name == "Petstore API 1.0.0"
        assert (result.folders, result.requests, result.environments) == (3, 6, 2)

        data = yaml.safe_load(output.read_text(encoding="utf-8"))
        assert data["type"] == "spec.insomnia.rest/5.0"
        assert data["spec"]["contents"]["info"]["title"] == "Petstore API"

    def test_no_temp_files_left(self, spec_file: Path, tmp_path: Path) -> None:
        output = tmp_path / "petstore-insomnia.yml"
        convert_file(spec_file, output)
        assert sorted(p.name for p in tmp_path.iterdir()) == [
            "petstore-insomnia.yml",
            "petstore.yaml",
        ]

    def test_missing_source(self, tmp_path: Path) -> None:
        output = tmp_path / "out.yml"
        with pytest.raises(SourceNotFoundError):
            convert_file(tmp_path / "missing.yaml", output)
        assert not output.exists()

    def test_parse_error_keeps_previous_output(self, spec_file: Path, tmp_path: Path) -> None:
        output = tmp_path / "petstore-insomnia.yml"
        convert_file(spec_file, output)
        previous = output.read_text(encoding="utf-8")

        spec_file.write_text("openapi: [broken\n", encoding="utf-8")
        with pytest.raises(SpecParseError):
            convert_file(spec_file, output)
        assert output.read_text(encoding="utf-8") == previous

    def test_write_error(self, spec_file: Path, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        with pytest.raises(OutputWriteError) as exc_info:
            convert_file(spec_file, blocker / "out.yml")
        assert exc_info.value.stage == "write"

    def test_fresh_ids_each_run(self, spec_file: Path, tmp_path: Path) -> None:
        first = yaml.safe_load(render_source(str(spec_file))[1])
        second = yaml.safe_load(render_source(str(spec_file))[1])
        assert first["meta"]["id"] != second["meta"]["id"]
        assert [f["name"] for f in first["collection"]] == [f["name"] for f in second["collection"]]


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permission bits")
class TestOutputMode:
    def test_new_output_follows_umask(self, spec_file: Path, tmp_path: Path) -> None:
        output = tmp_path / "petstore-insomnia.yml"
        previous = os.umask(0o022)
        try:
            convert_file(spec_file, output)
        finally:
            os.umask(previous)
        assert stat.S_IMODE(output.stat().st_mode) == 0o644

    def test_existing_output_keeps_its_mode(self, spec_file: Path, tmp_path: Path) -> None:
        output = tmp_path / "petstore-insomnia.yml"
        output.write_text("old\n", encoding="utf-8")
        output.chmod(0o640)
        convert_file(spec_file, output)
        assert stat.S_IMODE(output.stat().st_mode) == 0o640
        assert output.read_text(encoding="utf-8") != "old\n"
