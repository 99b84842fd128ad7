import json

import pytest

from xmltv_converter.exceptions import ReplacementConfigInvalid, ReplacementImageUnreadable
from xmltv_converter.services.replacement_service import ReplacementRegistry, load_replacements


def test_registry_reads_posters_eagerly(tmp_path):
    poster = tmp_path / "weather.jpg"
    poster.write_bytes(b"poster-bytes")

    registry = ReplacementRegistry.from_entries([("Weather", "Daily forecast", poster)])
    poster.unlink()

    replacement = registry.lookup("Weather")
    assert replacement is not None
    assert replacement.plot == "Daily forecast"
    assert replacement.image == b"poster-bytes"


def test_registry_lookup_is_exact_match(tmp_path):
    poster = tmp_path / "weather.jpg"
    poster.write_bytes(b"x")
    registry = ReplacementRegistry.from_entries([("Weather", "Daily forecast", poster)])

    assert registry.lookup("weather") is None
    assert registry.lookup("Weather ") is None
    assert registry.lookup("Weather Live") is None


def test_registry_first_entry_wins(tmp_path):
    first = tmp_path / "first.jpg"
    second = tmp_path / "second.jpg"
    first.write_bytes(b"first")
    second.write_bytes(b"second")

    registry = ReplacementRegistry.from_entries([
        ("Weather", "First", first),
        ("Weather", "Second", second),
    ])

    assert len(registry) == 1
    assert registry.lookup("Weather").plot == "First"
    assert registry.lookup("Weather").image == b"first"


def test_registry_unreadable_poster_is_fatal(tmp_path):
    with pytest.raises(ReplacementImageUnreadable):
        ReplacementRegistry.from_entries([("Weather", "Daily forecast", tmp_path / "missing.jpg")])


def test_load_replacements_missing_file_is_empty(tmp_path):
    registry = load_replacements(tmp_path / "replacements.json", tmp_path)

    assert len(registry) == 0


def test_load_replacements_joins_poster_folder(tmp_path):
    posters = tmp_path / "replacementposters"
    posters.mkdir()
    (posters / "weather.jpg").write_bytes(b"weather")
    config = tmp_path / "replacements.json"
    config.write_text(json.dumps([
        {"name": "Weather", "description": "Daily forecast", "poster": "weather.jpg"},
    ]))

    registry = load_replacements(config, posters)

    assert registry.lookup("Weather").image == b"weather"


def test_load_replacements_missing_poster_is_fatal(tmp_path):
    config = tmp_path / "replacements.json"
    config.write_text(json.dumps([
        {"name": "Weather", "description": "Daily forecast", "poster": "weather.jpg"},
    ]))

    with pytest.raises(ReplacementImageUnreadable):
        load_replacements(config, tmp_path)


@pytest.mark.parametrize("content", ["not json", '{"name": "Weather"}', '[{"name": "Weather"}]'])
def test_load_replacements_rejects_invalid_file(tmp_path, content):
    config = tmp_path / "replacements.json"
    config.write_text(content)

    with pytest.raises(ReplacementConfigInvalid):
        load_replacements(config, tmp_path)
