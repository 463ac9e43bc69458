"""Tests for configuration loading."""

import pytest

from shiftplan.config import SchedulerConfig, SearchOptions, load_config
from shiftplan.exceptions import ConfigError


def test_defaults():
    cfg = load_config(None)
    assert cfg == SchedulerConfig()
    assert cfg.search.max_iterations == 5000
    assert cfg.search.start_temperature == 100.0
    assert cfg.search.cooling_rate == 0.95
    assert cfg.rules.min_rest_hours == 8.0
    assert cfg.weights.night_fairness == 10.0
    assert cfg.weights.avoided_shift_type == 0.0


def test_load_yaml(tmp_path):
    path = tmp_path / "shiftplan.yaml"
    path.write_text(
        "search:\n"
        "  maxIterations: 12000\n"
        "  seed: 5\n"
        "rules:\n"
        "  min_rest_hours: 11\n"
        "weights:\n"
        "  avoided_shift_type: 2.5\n"
    )
    cfg = load_config(path)
    assert cfg.search.max_iterations == 12000
    assert cfg.search.seed == 5
    assert cfg.rules.min_rest_hours == 11
    assert cfg.weights.avoided_shift_type == 2.5
    assert cfg.weights.night_fairness == 10.0


def test_load_json(tmp_path):
    path = tmp_path / "shiftplan.json"
    path.write_text('{"search": {"cooling_rate": 0.99}}')
    assert load_config(path).search.cooling_rate == 0.99


def test_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / "empty.yml"
    path.write_text("")
    assert load_config(path) == SchedulerConfig()


@pytest.mark.parametrize(
    "content",
    [
        "unknown_section: {}\n",
        "search:\n  max_iterationz: 10\n",
        "search:\n  cooling_rate: 1.5\n",
        "weights:\n  night_fairness: -1\n",
        "- just\n- a list\n",
    ],
)
def test_invalid_yaml_rejected(tmp_path, content):
    path = tmp_path / "bad.yaml"
    path.write_text(content)
    with pytest.raises(ConfigError):
        load_config(path)


def test_unsupported_format(tmp_path):
    path = tmp_path / "cfg.toml"
    path.write_text("")
    with pytest.raises(ConfigError):
        load_config(path)


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "nope.yaml")


def test_search_option_validation():
    with pytest.raises(ConfigError):
        SearchOptions(start_temperature=0)
    with pytest.raises(ConfigError):
        SearchOptions(max_iterations=-1)
    # ConfigError is a ValueError
    with pytest.raises(ValueError):
        SearchOptions(cooling_rate=0)


def test_with_search_ignores_none():
    cfg = SchedulerConfig().with_search(max_iterations=None, seed=9)
    assert cfg.search.max_iterations == 5000
    assert cfg.search.seed == 9
