"""
Tests for the driver: full runs over a host mod list.
"""

import itertools
import logging

import pytest

from moddetective.detect.driver import SUCCESS_MESSAGE, collect, initialize
from moddetective.detect.report import BadModsFound
from moddetective.host.base import SchemaTier, SubtypeFinder

from conftest import FakeLoader, make_mod


class CountingLoader(FakeLoader):
    def __init__(self, mods):
        super().__init__(mods)
        self.calls = 0

    def list_mods(self):
        self.calls += 1
        return super().list_mods()


def example_mods():
    return [
        make_mod("a", version="1.0", tier=SchemaTier.V1),
        make_mod("b", version="${version}", tier=SchemaTier.V0, refmap=True),
    ]


class TestInitialize:

    def test_no_mods(self, caplog):
        with caplog.at_level(logging.INFO):
            initialize(FakeLoader([]))
        assert SUCCESS_MESSAGE in caplog.text

    def test_clean_mods(self, caplog):
        mods = [make_mod("a"), make_mod("b", tier=SchemaTier.V2)]
        with caplog.at_level(logging.INFO):
            initialize(FakeLoader(mods))
        assert SUCCESS_MESSAGE in caplog.text

    def test_example_report(self):
        with pytest.raises(BadModsFound) as excinfo:
            initialize(FakeLoader(example_mods()))

        assert str(excinfo.value) == (
            "Bad mods found: \n"
            "- b (B) by unknown\n"
            "  - Missing version replacement: ${version}\n"
            "  - Outdated schema: v0\n"
            "  - Found unnamed mixin refmap 'build-refmap.json'"
        )

    def test_no_success_line_on_failure(self, caplog):
        with caplog.at_level(logging.INFO):
            with pytest.raises(BadModsFound):
                initialize(FakeLoader(example_mods()))
        assert SUCCESS_MESSAGE not in caplog.text


class TestCollect:

    def test_enumeration_order_irrelevant(self):
        mods = [
            make_mod("zeta", version="$version"),
            make_mod("alpha", tier=SchemaTier.V0, refmap=True),
            make_mod("mid", tier=SchemaTier.V2, warnings=["w1", "w2"]),
            make_mod("clean"),
        ]
        rendered = {
            collect(FakeLoader(order)).render()
            for order in itertools.permutations(mods)
        }
        assert len(rendered) == 1

    def test_finder_runs_once_on_same_mod_list(self):
        class CountingFinder(SubtypeFinder):
            calls = 0
            indexed = None

            def index(self, mods):
                CountingFinder.indexed = [m.metadata().id for m in mods]

            def find_subtype_names_matching(self, base_type_id, name_suffix):
                CountingFinder.calls += 1
                return ["gui.ShopContainer"]

            def owner_of(self, name):
                return "shop"

        loader = CountingLoader([make_mod("a"), make_mod("b")])
        report = collect(loader, CountingFinder())
        assert loader.calls == 1
        assert CountingFinder.calls == 1
        assert CountingFinder.indexed == ["a", "b"]
        assert len(report) == 1
        assert "- Class gui.ShopContainer loaded by shop" in report.render()

    def test_mods_listed_before_classes(self):
        class Finder(SubtypeFinder):
            def find_subtype_names_matching(self, base_type_id, name_suffix):
                return ["aaa.FirstContainer"]

            def owner_of(self, name):
                return "zzz"

        report = collect(FakeLoader([make_mod("zzz", tier=SchemaTier.V0)]), Finder())
        lines = report.render().splitlines()
        assert lines[1].startswith("- zzz")
        assert lines[3] == "- Class aaa.FirstContainer loaded by zzz"
