"""Property checks for the abstraction on generated two-domain architectures."""

from __future__ import annotations

from hypothesis import given, settings, strategies as st
from hypothesis.strategies import composite

from archgraph.models import Node
from archgraph.processing import AbstractionEngine, AbstractionOptions, PreProcessor, build_abstraction_map
from record_builders import contains, depends, node, path

DOMAINS = ("D0", "D1")
LAYERS = {d: tuple(f"{d}L{i}" for i in range(2)) for d in DOMAINS}
MODULES = {layer: tuple(f"{layer}M{j}" for j in range(2)) for d in DOMAINS for layer in LAYERS[d]}
NODES = {
    **{d: node(d, "Domain") for d in DOMAINS},
    **{layer: node(layer, "Layer", depth=1) for d in DOMAINS for layer in LAYERS[d]},
    **{m: node(m, depth=2) for ms in MODULES.values() for m in ms},
}
PARENT = {
    **{layer: d for d in DOMAINS for layer in LAYERS[d]},
    **{m: layer for layer, ms in MODULES.items() for m in ms},
}
ALL_MODULES = tuple(m for ms in MODULES.values() for m in ms)


def _c(child):
    return contains(f"c-{child}", PARENT[child], child)


def records_for(dep_id, source, target):
    """One record per ancestor level of the target, the way the query returns them."""
    layer_s, layer_t = PARENT[source], PARENT[target]
    domain_s, domain_t = PARENT[layer_s], PARENT[layer_t]
    lead = (_c(layer_s), _c(source), depends(dep_id, source, target))
    return [
        path(NODES[domain_s], NODES[target], *lead),
        path(NODES[domain_s], NODES[layer_t], *lead, _c(target)),
        path(NODES[domain_s], NODES[domain_t], *lead, _c(layer_t), _c(target)),
    ]


@composite
def dependency_records(draw):
    pairs = draw(st.lists(
        st.tuples(st.sampled_from(ALL_MODULES), st.sampled_from(ALL_MODULES)).filter(lambda p: p[0] != p[1]),
        min_size=1,
        max_size=8,
    ))
    records = []
    for i, (source, target) in enumerate(pairs):
        records.extend(records_for(f"x{i}", source, target))
    return records, len(pairs)


def _abstract(records, max_depth):
    context = {node_id: Node.from_record(record) for node_id, record in NODES.items()}
    engine = AbstractionEngine(PreProcessor(records), context)
    return engine.format_to_graph("generated", AbstractionOptions(max_depth=max_depth))


depths = st.sampled_from([None, 0, 1, 2])


@settings(max_examples=60, deadline=None)
@given(dependency_records(), depths, st.data())
def test_result_does_not_depend_on_record_order(generated, max_depth, data):
    records, _count = generated
    shuffled = data.draw(st.permutations(records))
    first = _abstract(records, max_depth)
    second = _abstract(shuffled, max_depth)
    assert set(first.graph.nodes) == set(second.graph.nodes)
    assert sorted((e.source, e.target, e.weight) for e in first.graph.edges.values()) == sorted(
        (e.source, e.target, e.weight) for e in second.graph.edges.values()
    )
    assert first.abstraction_map == second.abstraction_map


@settings(max_examples=60, deadline=None)
@given(dependency_records(), depths)
def test_weights_count_every_raw_dependency_once(generated, max_depth):
    records, count = generated
    result = _abstract(records, max_depth)
    assert sum(e.weight for e in result.graph.edges.values()) == count


@settings(max_examples=60, deadline=None)
@given(dependency_records(), depths)
def test_no_orphans_and_no_collapsed_nodes(generated, max_depth):
    records, _count = generated
    result = _abstract(records, max_depth)
    graph = result.graph
    for edge in graph.edges.values():
        assert edge.source in graph.nodes
        assert edge.target in graph.nodes
    assert not set(result.abstraction_map) & set(graph.nodes)
    assert all(n.parent is None or n.parent in graph.nodes for n in graph.nodes.values())


@settings(max_examples=60, deadline=None)
@given(dependency_records(), st.sampled_from([0, 1, 2]))
def test_abstraction_map_is_idempotent(generated, max_depth):
    records, _count = generated
    mapping = build_abstraction_map(PreProcessor(records).paths, max_depth)
    for source, target in mapping.items():
        assert source != target
        assert target not in mapping
