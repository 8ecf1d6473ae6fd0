"""
Tests for fabric.mod.json parsing.
"""

import json

import pytest

from moddetective.detect.report import BadModReport
from moddetective.detect.rules import check_metadata
from moddetective.detect.sources import ModSource
from moddetective.errors import MetadataError
from moddetective.host.base import LATEST_SCHEMA_TIER, SchemaTier
from moddetective.host.metadata import parse_mod_metadata

from conftest import FakeMod


def parse(data):
    return parse_mod_metadata(json.dumps(data))


def warnings_of(meta):
    collected = []
    meta.emit_format_warnings(collected.append)
    return collected


class TestSchemaVersion:

    def test_missing_is_v0(self):
        assert parse({"id": "a"}).schema_tier == SchemaTier.V0

    def test_explicit_tiers(self):
        assert parse({"schemaVersion": 0, "id": "a"}).schema_tier == SchemaTier.V0
        assert parse({"schemaVersion": 1, "id": "a"}).schema_tier == LATEST_SCHEMA_TIER

    def test_intermediate_tier_never_produced(self):
        tiers = {parse({"schemaVersion": v, "id": "a"}).schema_tier for v in (0, 1)}
        assert SchemaTier.V1 not in tiers

    @pytest.mark.parametrize("raw", [2, 3, -1, "1", True])
    def test_unsupported(self, raw):
        with pytest.raises(MetadataError):
            parse({"schemaVersion": raw, "id": "a"})


class TestFields:

    def test_basic_fields(self):
        meta = parse({
            "schemaVersion": 1,
            "id": "examplemod",
            "name": "Example Mod",
            "version": "${version}",
            "authors": ["Alice", {"name": "Bob", "contact": {}}],
        })
        assert meta.id == "examplemod"
        assert meta.name == "Example Mod"
        assert meta.version == "${version}"
        assert meta.authors == ("Alice", "Bob")

    def test_name_defaults_to_id(self):
        assert parse({"id": "a"}).name == "a"

    def test_missing_version_is_empty(self):
        assert parse({"id": "a"}).version == ""

    def test_missing_id(self):
        with pytest.raises(MetadataError, match="Missing mod id"):
            parse({"schemaVersion": 1})

    def test_invalid_json(self):
        with pytest.raises(MetadataError, match="Invalid JSON"):
            parse_mod_metadata("{not json", origin="broken/fabric.mod.json")

    def test_non_object_root(self):
        with pytest.raises(MetadataError):
            parse_mod_metadata("[]")

    def test_origin_in_message(self):
        with pytest.raises(MetadataError, match="^broken/fabric.mod.json: "):
            parse_mod_metadata("[]", origin="broken/fabric.mod.json")


class TestFormatWarnings:

    def test_unknown_and_duplicate_keys(self):
        text = '{"schemaVersion": 1, "id": "a", "flavor": 1, "id": "a", "version": "1"}'
        meta = parse_mod_metadata(text)
        assert warnings_of(meta) == [
            'Unsupported root entry "flavor"',
            'Duplicate root entry "id"',
        ]

    def test_bad_author_and_version(self):
        meta = parse({"schemaVersion": 1, "id": "a", "version": 3, "authors": ["A", 7]})
        assert warnings_of(meta) == [
            '"version" should be a string, got int',
            "Author entry at index 1 is not a string or object with a name",
        ]
        assert meta.version == "3"
        assert meta.authors == ("A",)

    def test_v0_collects_nothing(self):
        meta = parse({"schemaVersion": 0, "id": "a", "flavor": 1, "authors": [7]})
        assert warnings_of(meta) == []

    def test_schema_v1_file_reports_unknown_entry(self):
        """A real schemaVersion 1 file goes through the format warning rule."""
        meta = parse_mod_metadata('{"schemaVersion": 1, "id": "a", "version": "1", "bogus": 1}')
        report = BadModReport()
        check_metadata(FakeMod(meta), report)
        assert report.errors_for(ModSource("a")) == ['Unsupported root entry "bogus"']

    def test_clean_latest(self):
        meta = parse({"schemaVersion": 1, "id": "a", "version": "1.0", "name": "A"})
        assert warnings_of(meta) == []
