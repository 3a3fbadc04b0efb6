"""Tests for typed plugin records and the YAML/JSON store."""

import json
import os
from datetime import date, datetime, timezone
from unittest.mock import patch

import pytest
import yaml

from catalog import store
from catalog.models import PluginRecord, RecordValidationError, VersionEntry

UTC = timezone.utc

RECORD_YAML = """\
name: Spring Security Core
desc: Security for Grails apps
coords: org.grails.plugins:spring-security-core
owner: grails
vcs: https://github.com/grails/grails-spring-security-core
docs: https://grails.github.io/grails-spring-security-core/
maven-repo: https://repo.grails.org/grails/core
labels:
  - security
licenses:
  - Apache-2.0
x-custom: kept
versions:
  - version: 4.0.1
    date: 2023-10-03T14:25:07Z
    grailsVersion: 4.0.0 > *
  - version: 3.2.0
    coords: org.grails.plugins:spring-security-core-legacy
    maven-repo: https://repo.grails.org/grails/plugins
"""


class TestPluginRecord:
    """Test record validation and field-map conversion."""

    def test_from_mapping(self):
        record = PluginRecord.from_mapping(yaml.safe_load(RECORD_YAML))

        assert record.coords.artifact_id == "spring-security-core"
        assert record.maven_repo == "https://repo.grails.org/grails/core"
        assert record.labels == ["security"]
        assert [v.version for v in record.versions] == ["4.0.1", "3.2.0"]
        assert record.versions[0].grails_version == "4.0.0 > *"
        assert record.extra == {"x-custom": "kept"}

    def test_round_trip_keeps_unknown_keys(self):
        data = yaml.safe_load(RECORD_YAML)
        mapping = PluginRecord.from_mapping(data).to_mapping()

        assert mapping["x-custom"] == "kept"
        assert mapping["versions"][1] == {
            "version": "3.2.0",
            "coords": "org.grails.plugins:spring-security-core-legacy",
            "maven-repo": "https://repo.grails.org/grails/plugins",
        }

    def test_missing_coords(self):
        with pytest.raises(RecordValidationError, match="no 'coords'"):
            PluginRecord.from_mapping({"name": "x"})

    def test_malformed_coords(self):
        with pytest.raises(RecordValidationError, match="Invalid coords"):
            PluginRecord.from_mapping({"coords": "just-a-name"})

    def test_not_a_mapping(self):
        with pytest.raises(RecordValidationError):
            PluginRecord.from_mapping(["coords", "a:b"])

    def test_bad_versions_shape(self):
        with pytest.raises(RecordValidationError):
            PluginRecord.from_mapping({"coords": "a:b", "versions": {"version": "1.0"}})
        with pytest.raises(RecordValidationError):
            PluginRecord.from_mapping({"coords": "a:b", "versions": [{"date": "2020-01-01"}]})

    def test_bad_labels_shape(self):
        with pytest.raises(RecordValidationError):
            PluginRecord.from_mapping({"coords": "a:b", "labels": {"a": 1}})

    def test_has_version(self):
        record = PluginRecord.from_mapping({"coords": "a:b", "versions": [{"version": "1.0"}]})
        assert record.has_version("1.0")
        assert not record.has_version("1.0.0")

    def test_bare_entry_mapping(self):
        assert VersionEntry(version="4.0.1").to_mapping() == {"version": "4.0.1"}


class TestDates:
    """Test restoring dates that round-tripped through the store as text."""

    def test_parse_stored_date(self):
        assert store.parse_stored_date("2023-10-03T14:25:07Z") == datetime(2023, 10, 3, 14, 25, 7, tzinfo=UTC)
        assert store.parse_stored_date("2023-10-03 14:25:07+02:00") == datetime(2023, 10, 3, 12, 25, 7, tzinfo=UTC)
        assert store.parse_stored_date("last tuesday") is None

    def test_restore_date_variants(self):
        assert store.restore_date(None) is None
        assert store.restore_date("2020-01-01T08:00:00Z") == datetime(2020, 1, 1, 8, tzinfo=UTC)

    @pytest.mark.parametrize("value", [
        datetime(2020, 1, 1, 8),
        datetime(2020, 1, 1, 8, tzinfo=UTC),
        date(2020, 1, 1),
    ])
    def test_loaded_dates_are_left_alone(self, value):
        restored = store.restore_date(value)
        assert restored == value
        assert type(restored) is type(value)
        assert getattr(restored, "tzinfo", None) == getattr(value, "tzinfo", None)

    def test_restoring_from_text_warns(self, caplog):
        with caplog.at_level("WARNING"):
            store.restore_date("2020-01-01T08:00:00Z", context="for 1.0")
        assert "Restored date '2020-01-01T08:00:00Z' for 1.0 from text" in caplog.text

    def test_unparseable_text_is_kept(self, caplog):
        with caplog.at_level("WARNING"):
            assert store.restore_date("sometime", context="for 1.0") == "sometime"
        assert "sometime" in caplog.text

    def test_restore_dates_in_place(self):
        entries = [VersionEntry(version="1.0", date="2020-01-01T08:00:00Z"), VersionEntry(version="0.9")]
        store.restore_dates(entries)
        assert entries[0].date == datetime(2020, 1, 1, 8, tzinfo=UTC)
        assert entries[1].date is None


class TestRecordFiles:
    """Test reading and writing record files."""

    def test_is_record_file(self):
        assert store.is_record_file("grails-plugins/org/grails/plugins/cache.yml")
        assert store.is_record_file("cache.YAML")
        assert not store.is_record_file("README.md")

    def test_save_is_canonical_and_stable(self, tmp_path):
        path = tmp_path / "spring-security-core.yml"
        path.write_text(RECORD_YAML, encoding="utf-8")

        record = PluginRecord.from_mapping(store.load_mapping(str(path)))
        store.restore_dates(record.versions)
        store.save_record(str(path), record)
        first = path.read_text(encoding="utf-8")

        again = PluginRecord.from_mapping(store.load_mapping(str(path)))
        store.restore_dates(again.versions)
        store.save_record(str(path), again)

        assert path.read_text(encoding="utf-8") == first
        assert "date: 2023-10-03T14:25:07Z" in first
        assert "labels:\n  - security\n" in first

    def test_absent_lists_are_not_added(self, tmp_path):
        path = tmp_path / "cache.yml"
        path.write_text("name: Cache\ncoords: a:b\nversions: []\n", encoding="utf-8")

        record = PluginRecord.from_mapping(store.load_mapping(str(path)))
        store.save_record(str(path), record)

        assert record.labels is None and record.licenses is None
        assert path.read_text(encoding="utf-8") == "name: Cache\ncoords: a:b\nversions: []\n"

    def test_present_empty_lists_are_kept(self):
        record = PluginRecord.from_mapping({"coords": "a:b", "labels": [], "licenses": None})
        assert record.to_mapping()["labels"] == []
        assert record.to_mapping()["licenses"] == []

    def test_naive_timestamp_stays_naive(self, tmp_path):
        path = tmp_path / "cache.yml"
        path.write_text("coords: a:b\nversions:\n  - version: '1.0'\n    date: 2020-01-01 08:00:00\n", encoding="utf-8")

        record = PluginRecord.from_mapping(store.load_mapping(str(path)))
        store.restore_dates(record.versions)
        store.save_record(str(path), record)

        assert store.load_mapping(str(path))["versions"][0]["date"] == datetime(2020, 1, 1, 8)

    def test_dates_reload_as_timestamps(self, tmp_path):
        path = tmp_path / "cache.yml"
        record = PluginRecord.from_mapping({"coords": "a:b"})
        record.versions.append(VersionEntry(version="1.0", date=datetime(2021, 5, 6, 7, 8, 9, tzinfo=UTC)))
        store.save_record(str(path), record)

        loaded = store.load_mapping(str(path))
        assert isinstance(loaded["versions"][0]["date"], datetime)
        assert store.restore_date(loaded["versions"][0]["date"]) == datetime(2021, 5, 6, 7, 8, 9, tzinfo=UTC)

    def test_failed_write_leaves_original(self, tmp_path):
        path = tmp_path / "cache.yml"
        path.write_text("coords: a:b\n", encoding="utf-8")

        with patch("catalog.store.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                store.atomic_write(str(path), "coords: changed\n")

        assert path.read_text(encoding="utf-8") == "coords: a:b\n"
        assert os.listdir(tmp_path) == ["cache.yml"]

    def test_load_mapping_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yml"
        path.write_text("coords: [unclosed\n", encoding="utf-8")

        with pytest.raises(yaml.YAMLError):
            store.load_mapping(str(path))


class TestWriteIndex:
    """Test the aggregate JSON index."""

    def test_flat_array_with_iso_dates(self, tmp_path):
        record = PluginRecord.from_mapping({"coords": "a:b", "name": "B"})
        record.versions.append(VersionEntry(version="1.0", date=datetime(2021, 5, 6, 7, 8, 9, tzinfo=UTC)))
        out = tmp_path / "index.json"

        count = store.write_index([record, PluginRecord.from_mapping({"coords": "c:d"})], str(out))

        data = json.loads(out.read_text(encoding="utf-8"))
        assert count == 2
        assert isinstance(data, list) and len(data) == 2
        assert data[0]["coords"] == "a:b"
        assert data[0]["versions"] == [{"version": "1.0", "date": "2021-05-06T07:08:09Z"}]
