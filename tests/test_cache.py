# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

import pytest

from confstore.core.cache import MISSING, CaseInsensitiveDict, SectionCache, SectionView


def test_cache_basic():
    """Test save and load"""
    cache = SectionCache()

    cache.save("Net", "Host", "localhost")

    assert cache.load("Net", "Host") == "localhost"
    assert cache.load("net", "HOST") == "localhost"
    assert cache.size() == 1
    assert "NET" in cache


def test_cache_missing_is_distinct_from_empty():
    """Cached empty string is not the absent signal"""
    cache = SectionCache()
    cache.save("Net", "Proxy", "")

    assert cache.load("Net", "Proxy") == ""
    assert cache.load("Net", "Proxy") is not MISSING
    assert cache.load("Net", "Other") is MISSING
    assert cache.load("Other", "Proxy") is MISSING
    assert not MISSING


def test_cache_delete_key_and_section():
    """Delete one key, or the whole section when key is omitted"""
    cache = SectionCache()
    cache.save("Net", "Host", "a")
    cache.save("Net", "Port", "1")
    cache.save("Ui", "Theme", "dark")

    assert cache.delete("net", "host") is True
    assert cache.load("Net", "Host") is MISSING
    assert cache.load("Net", "Port") == "1"
    assert cache.delete("Net", "Host") is False

    assert cache.delete("NET") is True
    assert "Net" not in cache
    assert cache.load("Ui", "Theme") == "dark"
    assert cache.delete("Missing") is False


def test_cache_clear():
    cache = SectionCache()
    cache.save("a", "b", "c")
    cache.mark_complete("a", ["b"])
    cache.clear()

    assert cache.size() == 0
    assert not cache.is_complete("a")


def test_complete_mark_follows_key_set():
    """Adding or removing a key drops the complete mark"""
    cache = SectionCache()
    cache.save("Net", "Host", "a")
    cache.save("Net", "Ghost", "default")
    cache.mark_complete("Net", ["host"])

    assert cache.is_complete("net")
    # entries outside the listed keys are pruned
    assert cache.load("Net", "Ghost") is MISSING

    cache.save("Net", "Host", "b")
    assert cache.is_complete("Net")

    cache.save("Net", "Port", "1")
    assert not cache.is_complete("Net")

    cache.mark_complete("Net", ["Host", "Port"])
    cache.delete("Net", "Port")
    assert not cache.is_complete("Net")


def test_case_insensitive_dict_keeps_first_spelling():
    data = CaseInsensitiveDict()
    data["Host"] = "a"
    data["HOST"] = "b"

    assert list(data) == ["Host"]
    assert data["host"] == "b"
    assert len(data) == 1
    assert 1 not in data


def test_section_view_is_a_snapshot():
    """Mutating the source does not change the view, and the view is read-only"""
    source = CaseInsensitiveDict({"Host": "localhost"})
    view = SectionView(source)
    source["Port"] = "8080"

    assert view == {"Host": "localhost"}
    assert view["HOST"] == "localhost"
    with pytest.raises(TypeError):
        view["Port"] = "1"
