"""CLI tests: subcommands on JSON record dumps."""

from __future__ import annotations

import json
from pathlib import Path

from archgraph.cli import build_parser, main
from record_builders import edge_dict, node_dict


def _write(tmp_path: Path, data: dict) -> str:
    target = tmp_path / "records.json"
    target.write_text(json.dumps(data), encoding="utf-8")
    return str(target)


def _dependency(source: str, target: str, edge_id: str) -> dict:
    return {
        "source": node_dict(source, "Domain", simpleName=source.upper()),
        "target": node_dict(target, "Domain", simpleName=target.upper()),
        "edges": [edge_dict(edge_id, source, target, "CALLS")],
    }


def test_parser_build_flags() -> None:
    args = build_parser().parse_args(
        ["build", "records.json", "--id", "n1", "--dependents", "--only-internal", "--min-dependencies", "2"]
    )
    assert args.command == "build"
    assert args.node_id == "n1"
    assert args.dependents is True
    assert args.only_internal is True
    assert args.min_dependencies == 2
    assert args.layer_depth is None


def test_build_prints_graph_json(tmp_path: Path, capsys) -> None:
    records = _write(tmp_path, {"dependencies": [_dependency("a", "b", "e")]})
    assert main(["build", records, "--id", "a", "--layer-depth", "0", "--indent", "0"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert [n["id"] for n in data["graph"]["nodes"]] == ["a", "b"]
    assert data["graph"]["nodes"][0]["properties"]["selected"] is True
    assert [e["id"] for e in data["graph"]["edges"]] == ["e"]
    assert data["violations"] == {"dependencyCycles": []}


def test_build_without_self_edges(tmp_path: Path, capsys) -> None:
    records = _write(tmp_path, {"dependencies": [_dependency("a", "a", "loop")]})
    assert main(["build", records, "--id", "a", "--no-self-edges"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["graph"]["edges"] == []
    assert [n["id"] for n in data["graph"]["nodes"]] == ["a"]


def test_domains_json(tmp_path: Path, capsys) -> None:
    records = _write(tmp_path, {"domains": [_dependency("a", "b", "e1"), _dependency("a", "b", "e2")]})
    assert main(["domains", records, "--json"]) == 0
    data = {d["id"]: d for d in json.loads(capsys.readouterr().out)}
    assert data["a"]["nrOutgoingDependencies"] == 2
    assert data["b"]["nrIncomingDependencies"] == 2


def test_domains_table(tmp_path: Path, capsys) -> None:
    records = _write(tmp_path, {"domains": [_dependency("a", "b", "e1")]})
    assert main(["domains", records]) == 0
    out = capsys.readouterr().out
    assert "Domains" in out
    assert "A" in out and "B" in out


def test_layers_prints_hierarchy(tmp_path: Path, capsys) -> None:
    records = _write(tmp_path, {"layers": [
        {"from": ["Layer_Api"], "to": ["Module"]},
        {"from": ["Domain"], "to": ["Layer_Api"]},
    ]})
    assert main(["layers", records]) == 0
    assert capsys.readouterr().out.splitlines() == ["Domain", "  Layer (Api)", "    Module"]


def test_errors_exit_with_status_one(tmp_path: Path) -> None:
    records = _write(tmp_path, {"layers": [{"from": ["A"], "to": ["B"]}, {"from": ["B"], "to": ["A"]}]})
    assert main(["--quiet", "layers", records]) == 1
    broken = _write(tmp_path, {"dependencies": [{"source": node_dict("a"), "edges": []}]})
    assert main(["--quiet", "build", broken, "--id", "a"]) == 1


def test_no_command_prints_help(capsys) -> None:
    assert main([]) == 1
    assert "usage" in capsys.readouterr().out
