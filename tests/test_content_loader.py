"""Tests for content_loader: path fallbacks and YAML/front-matter parsing."""
from __future__ import annotations

import logging

import pytest

from content_loader import (
    UNPARSABLE,
    candidate_paths,
    is_absolute,
    load_records,
    open_with_fallbacks,
    parse_document,
)


class TestCandidatePaths:
    def test_relative_gets_contents_fallback(self, empty_dir):
        assert candidate_paths("data/x.yml") == ["data/x.yml", "contents/data/x.yml"]

    def test_already_prefixed(self, empty_dir):
        assert candidate_paths("contents/data/x.yml") == ["contents/data/x.yml"]

    def test_posix_absolute(self, empty_dir):
        assert candidate_paths("/srv/data/x.yml") == ["/srv/data/x.yml"]

    @pytest.mark.parametrize("path", ["C:\\data\\x.yml", "c:/data/x.yml"])
    def test_windows_absolute(self, path, empty_dir):
        assert is_absolute(path)
        assert candidate_paths(path) == [path]

    def test_explicit_contents_dir(self):
        assert candidate_paths("data/x.yml", "site") == ["data/x.yml", "site/data/x.yml"]

    def test_prefix_must_be_a_directory(self, empty_dir):
        # "contents2/" is not the contents directory
        assert candidate_paths("contents2/x.yml") == ["contents2/x.yml", "contents/contents2/x.yml"]


class TestOpenWithFallbacks:
    def test_literal_path_wins(self, site_dir):
        (site_dir / "data").mkdir()
        (site_dir / "data" / "trajectory.yml").write_text("- label: literal\n")
        text, resolved = open_with_fallbacks("data/trajectory.yml", "test")
        assert resolved == "data/trajectory.yml"
        assert "literal" in text

    def test_contents_fallback(self, site_dir):
        text, resolved = open_with_fallbacks("data/trajectory.yml", "test")
        assert resolved == "contents/data/trajectory.yml"
        assert "PhD" in text

    def test_missing_logs_one_warning(self, empty_dir, caplog):
        with caplog.at_level(logging.WARNING):
            assert open_with_fallbacks("data/nope.yml", "trajectory-stepper") is None
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        message = warnings[0].getMessage()
        assert message.startswith("[trajectory-stepper]")
        assert "data/nope.yml, contents/data/nope.yml" in message

    def test_directory_is_not_a_file(self, empty_dir):
        (empty_dir / "data.yml").mkdir()
        assert open_with_fallbacks("data.yml", "test") is None

    def test_nul_byte_in_path(self, empty_dir, caplog):
        with caplog.at_level(logging.WARNING):
            assert open_with_fallbacks("data\x00.yml", "research-cards") is None
        assert len(caplog.records) == 1
        assert caplog.records[0].getMessage().startswith("[research-cards] unable to open any of:")


class TestParseDocument:
    def test_plain_yaml(self):
        assert parse_document("- a: 1\n", "x", "test") == [{"a": 1}]

    def test_front_matter_fences(self):
        text = "---\ntrajectory:\n  - label: A\n---\n\nBody text\n"
        assert parse_document(text, "x", "test") == {"trajectory": [{"label": "A"}]}

    def test_malformed_yaml(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert parse_document("- a: [1, 2\n", "bad.yml", "research-cards") is UNPARSABLE
        assert "[research-cards] unable to parse YAML at bad.yml" in caplog.text

    @pytest.mark.parametrize("period", ["2019-13-45", "2019-02-30"])
    def test_impossible_date(self, caplog, period):
        # PyYAML reads these as timestamps and raises ValueError
        with caplog.at_level(logging.WARNING):
            assert parse_document(f"- label: A\n  period: {period}\n", "t.yml", "trajectory-stepper") is UNPARSABLE
        assert "[trajectory-stepper] unable to parse YAML at t.yml" in caplog.text

    def test_valid_date_parsed(self):
        assert str(parse_document("- period: 2019-02-28\n", "x", "test")[0]["period"]) == "2019-02-28"


class TestLoadRecords:
    def test_top_level_list(self, site_dir):
        records = load_records("data/trajectory.yml", "trajectory", "test")
        assert [pos for pos, _ in records] == [1, 2, 3]
        assert records[0][1]["id"] == "phd"

    def test_keyed_list(self, site_dir):
        records = load_records("data/research.yml", "topics", "test")
        assert len(records) == 3

    def test_missing_file(self, empty_dir, caplog):
        with caplog.at_level(logging.WARNING):
            assert load_records("data/trajectory.yml", "trajectory", "test") == []
        assert len(caplog.records) == 1

    def test_malformed_yaml(self, empty_dir, caplog):
        (empty_dir / "bad.yml").write_text("topics: [\n")
        with caplog.at_level(logging.WARNING):
            assert load_records("bad.yml", "topics", "test") == []
        assert len(caplog.records) == 1

    def test_impossible_date_in_front_matter(self, empty_dir, caplog):
        (empty_dir / "fm.md").write_text("---\ntopics:\n  - title: A\n    date: 2020-02-30\n---\n")
        with caplog.at_level(logging.WARNING):
            assert load_records("fm.md", "topics", "research-cards") == []
        assert len(caplog.records) == 1
        assert "unable to parse YAML at fm.md" in caplog.text

    @pytest.mark.parametrize("content", ["", "just a string\n", "other: [1]\n", "topics: nope\n"])
    def test_wrong_shape(self, empty_dir, caplog, content):
        (empty_dir / "shape.yml").write_text(content)
        with caplog.at_level(logging.WARNING):
            assert load_records("shape.yml", "topics", "test") == []
        assert "no entries found in shape.yml" in caplog.text

    def test_non_mapping_items_skipped(self, empty_dir, caplog):
        (empty_dir / "mixed.yml").write_text("- label: A\n- just text\n- label: C\n")
        with caplog.at_level(logging.WARNING):
            records = load_records("mixed.yml", "topics", "test")
        assert [pos for pos, _ in records] == [1, 3]
        assert "skipping entry 2" in caplog.text
