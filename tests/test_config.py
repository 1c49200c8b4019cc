from __future__ import annotations

import logging

from rich.logging import RichHandler

from archgraph.config import DEFAULT_LAYER_DEPTH, QueryOptions, Range, load_query_options
from archgraph.logging import configure_cli_logging, get_logger, level_from_env


def test_defaults_without_environment(monkeypatch) -> None:
    for name in ("ARCHGRAPH_LAYER_DEPTH", "ARCHGRAPH_DEPENDENCY_DEPTH", "ARCHGRAPH_SELF_EDGES"):
        monkeypatch.delenv(name, raising=False)
    options = load_query_options("n1")
    assert options == QueryOptions(id="n1")
    assert options.layer_depth == DEFAULT_LAYER_DEPTH
    assert options.domain_id is None


def test_environment_defaults_and_overrides(monkeypatch) -> None:
    monkeypatch.setenv("ARCHGRAPH_LAYER_DEPTH", "3")
    monkeypatch.setenv("ARCHGRAPH_DEPENDENCY_DEPTH", "not a number")
    monkeypatch.setenv("ARCHGRAPH_SELF_EDGES", "false")
    options = load_query_options("n1", dependency_depth=None, domain_id="d")
    assert options.layer_depth == 3
    assert options.dependency_depth == 1
    assert options.self_edges is False
    assert options.domain_id == "d"
    assert load_query_options("n1", layer_depth=0).layer_depth == 0


def test_range_bounds() -> None:
    assert Range().is_open
    assert Range(0, 0).is_open
    assert Range(min=2).contains(2) and not Range(min=2).contains(1)
    assert Range(max=2).contains(0) and not Range(max=2).contains(3)


def test_cli_flags_override_log_level(monkeypatch) -> None:
    monkeypatch.setenv("ARCHGRAPH_LOG_LEVEL", "INFO")
    root = logging.getLogger("archgraph")
    configure_cli_logging()
    assert root.level == logging.INFO
    configure_cli_logging(verbose=True)
    assert get_logger("cli").getEffectiveLevel() == logging.DEBUG
    configure_cli_logging(quiet=True)
    assert get_logger("cli").getEffectiveLevel() == logging.ERROR
    assert sum(isinstance(h, RichHandler) for h in root.handlers) == 1
    root.setLevel(logging.WARNING)


def test_level_from_env(monkeypatch) -> None:
    monkeypatch.delenv("ARCHGRAPH_LOG_LEVEL", raising=False)
    assert level_from_env() == logging.WARNING
    monkeypatch.setenv("ARCHGRAPH_LOG_LEVEL", "debug")
    assert level_from_env() == logging.DEBUG
    monkeypatch.setenv("ARCHGRAPH_LOG_LEVEL", "chatty")
    assert level_from_env() == logging.INFO
