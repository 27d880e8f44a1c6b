"""Tests for template sources."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from petiteplatypus.core.errors import TemplateLoadError
from petiteplatypus.core.templates import (
    CONFIG_TEMPLATES,
    INITIAL_TEMPLATES,
    DirectoryTemplateSource,
    MappingTemplateSource,
    PackagedTemplateSource,
    get_default_template_source,
)


class TestPackagedTemplateSource:
    @pytest.mark.parametrize("name", CONFIG_TEMPLATES)
    def test_config_templates_are_valid_json(self, name):
        content = PackagedTemplateSource().load(name)

        assert isinstance(json.loads(content.decode("utf-8")), dict)

    def test_welcome_note_is_shipped(self):
        content = PackagedTemplateSource().load("Welcome.md")

        assert b"vault" in content

    def test_missing_template(self):
        with pytest.raises(TemplateLoadError) as exc_info:
            PackagedTemplateSource().load("missing.json")

        assert exc_info.value.name == "missing.json"


class TestDirectoryTemplateSource:
    def test_reads_bytes_verbatim(self, tmp_path: Path):
        (tmp_path / "app.json").write_bytes(b'{"a": 1}\r\n')

        assert DirectoryTemplateSource(tmp_path).load("app.json") == b'{"a": 1}\r\n'

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(TemplateLoadError, match="graph.json"):
            DirectoryTemplateSource(tmp_path).load("graph.json")


class TestMappingTemplateSource:
    def test_str_content_is_utf8_encoded(self):
        source = MappingTemplateSource({"Welcome.md": "Привет"})

        assert source.load("Welcome.md") == "Привет".encode("utf-8")

    def test_missing_name(self):
        with pytest.raises(TemplateLoadError):
            MappingTemplateSource({}).load("app.json")


def test_default_source_selection(tmp_path: Path):
    assert isinstance(get_default_template_source(), PackagedTemplateSource)
    assert isinstance(get_default_template_source(tmp_path), DirectoryTemplateSource)


def test_template_names():
    assert len(CONFIG_TEMPLATES) == 5
    assert INITIAL_TEMPLATES == ("Welcome.md",)
