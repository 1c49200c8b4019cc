"""Shared fixtures: a small sample architecture and its query records.

Sample (ids):

    d1 (Domain) -c1-> l1 (Layer) -c2-> m1, -c3-> m2
    d2 (Domain) -c4-> l2 (Layer) -c5-> m3

    m1 -x1-> m3, m2 -x2-> m3, m3 -x3-> m1

Records are listed the way the query layer returns them: the selected
node's containment chain first, then the dependency, then the other side's
ancestors top-down.
"""
import pytest

from record_builders import contains, cycle, depends, node, path


@pytest.fixture
def sample():
    nodes = {
        "d1": node("d1", "Domain", depth=0),
        "d2": node("d2", "Domain", depth=0),
        "l1": node("l1", "Layer", depth=1),
        "l2": node("l2", "Layer", depth=1),
        "m1": node("m1", "Module", depth=2),
        "m2": node("m2", "Module", depth=2),
        "m3": node("m3", "Module", depth=2),
    }
    e = {
        "c1": contains("c1", "d1", "l1"),
        "c2": contains("c2", "l1", "m1"),
        "c3": contains("c3", "l1", "m2"),
        "c4": contains("c4", "d2", "l2"),
        "c5": contains("c5", "l2", "m3"),
        "x1": depends("x1", "m1", "m3"),
        "x2": depends("x2", "m2", "m3"),
        "x3": depends("x3", "m3", "m1"),
    }
    n = nodes
    dependencies = []
    for chain, dep in (("c2", "x1"), ("c3", "x2")):
        # one record per ancestor of the dependency, as the query returns them
        dependencies.append(path(n["d1"], n["m3"], e["c1"], e[chain], e[dep]))
        dependencies.append(path(n["d1"], n["l2"], e["c1"], e[chain], e[dep], e["c5"]))
        dependencies.append(path(n["d1"], n["d2"], e["c1"], e[chain], e[dep], e["c4"], e["c5"]))
    dependents = [
        path(n["m3"], n["d1"], e["c1"], e["c2"], e["x3"]),
        path(n["l2"], n["d1"], e["c1"], e["c2"], e["x3"], e["c5"]),
        path(n["d2"], n["d1"], e["c1"], e["c2"], e["x3"], e["c4"], e["c5"]),
    ]
    parents = [path(n["d1"], n["d1"])]
    children = [
        path(n["d1"], n["d1"]),
        path(n["d1"], n["l1"], e["c1"]),
    ]
    cycles = [
        cycle(n["m1"], (e["x1"], n["m1"], n["m3"]), (e["x3"], n["m3"], n["m1"])),
        cycle(n["m3"], (e["x3"], n["m3"], n["m1"]), (e["x1"], n["m1"], n["m3"])),
    ]
    return {
        "nodes": nodes,
        "edges": e,
        "parents": parents,
        "children": children,
        "dependencies": dependencies,
        "dependents": dependents,
        "cycles": cycles,
    }
