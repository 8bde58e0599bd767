import pytest

from engine.graph.validator import DAGValidator, Status
from schemas.graph_data import Edge
from tests.helpers import make_graph


@pytest.fixture
def validator():
    return DAGValidator()


@pytest.mark.parametrize(
    "node_ids,pairs",
    [
        ([], []),
        ([1], []),
        ([1], [(1, 1)]),
        ([1], [(1, 2), (2, 1)]),
    ],
)
def test_too_few_nodes_regardless_of_edges(validator, node_ids, pairs):
    nodes, edges = make_graph(node_ids, pairs)
    assert validator.validate(nodes, edges) is Status.TOO_FEW_NODES


def test_scenario_a_two_nodes_no_edges(validator):
    assert validator.validate(*make_graph([1, 2], [])) is Status.DISCONNECTED


def test_scenario_b_single_edge(validator):
    assert validator.validate(*make_graph([1, 2], [(1, 2)])) is Status.VALID


def test_scenario_c_three_cycle(validator):
    nodes, edges = make_graph([1, 2, 3], [(1, 2), (2, 3), (3, 1)])
    assert validator.validate(nodes, edges) is Status.CYCLE_DETECTED


def test_self_loop_precedes_cycle(validator):
    nodes, edges = make_graph([1, 2], [(1, 2), (2, 1), (2, 2)])
    assert validator.validate(nodes, edges) is Status.SELF_LOOP


def test_cycle_precedes_disconnected(validator):
    nodes, edges = make_graph([1, 2, 3], [(1, 2), (2, 1)])
    report = validator.report(nodes, edges)
    assert report.status is Status.CYCLE_DETECTED
    assert report.isolated == []


def test_cycle_in_later_component_found(validator):
    nodes, edges = make_graph([1, 2, 3, 4, 5], [(1, 2), (3, 4), (4, 5), (5, 3)])
    report = validator.report(nodes, edges)
    assert report.status is Status.CYCLE_DETECTED
    assert report.cycle == ["3", "4", "5", "3"]


def test_diamond_is_not_a_cycle(validator):
    nodes, edges = make_graph([1, 2, 3, 4], [(1, 2), (1, 3), (2, 4), (3, 4)])
    assert validator.validate(nodes, edges) is Status.VALID


def test_forest_of_separate_edges_is_valid(validator):
    # every node touches an edge; a single component is not required
    nodes, edges = make_graph([1, 2, 3, 4], [(1, 2), (3, 4)])
    assert validator.validate(nodes, edges) is Status.VALID


def test_isolated_node_reported(validator):
    nodes, edges = make_graph([1, 2, 3], [(1, 2)])
    report = validator.report(nodes, edges)
    assert report.status is Status.DISCONNECTED
    assert report.isolated == ["3"]
    assert report.message == "Invalid: All nodes must be connected"


def test_long_chain_does_not_hit_recursion_limit(validator):
    ids = list(range(5000))
    pairs = list(zip(ids, ids[1:]))
    assert validator.validate(*make_graph(ids, pairs)) is Status.VALID

    pairs.append((ids[-1], ids[0]))
    assert validator.validate(*make_graph(ids, pairs)) is Status.CYCLE_DETECTED


def test_dangling_edge_ignored_for_cycles(validator):
    nodes, edges = make_graph([1, 2], [(1, 2)])
    edges.append(Edge(id="dangling", source="2", target="9"))
    edges.append(Edge(id="back", source="9", target="1"))
    assert validator.validate(nodes, edges) is Status.VALID


def test_validate_is_idempotent(validator):
    nodes, edges = make_graph([1, 2, 3], [(1, 2)])
    assert validator.validate(nodes, edges) == validator.validate(nodes, edges)


def test_min_nodes_configurable():
    validator = DAGValidator(min_nodes=3)
    report = validator.report(*make_graph([1, 2], [(1, 2)]))
    assert report.status is Status.TOO_FEW_NODES
    assert report.message == "Invalid: Need at least 3 nodes"


def test_report_messages(validator):
    assert validator.report(*make_graph([1, 2], [(1, 2)])).message == "Valid DAG"
    assert validator.report(*make_graph([1], [])).message == "Invalid: Need at least 2 nodes"
    assert not hasattr(Status.VALID, "message")
    assert Status.VALID.is_valid
    assert not Status.SELF_LOOP.is_valid
