from datetime import datetime, timedelta

from lifemap_flow.flow import calculate_flow
from lifemap_flow.schema import Edge, LogEntry, Node, Root, TimeWindow
from lifemap_flow.vitality import NO_ACTIVITY_DAYS, last_activity, node_vitality

NOW = datetime(2025, 6, 15, 12, 0)


def sample_snapshot():
    created = NOW - timedelta(days=30)
    nodes = [
        Node("job", "source", "Job", capacity=40, category="spring", created_at=created),
        Node("goal", "bed", "Freedom", created_at=created),
        Node("hobby", "plant", "Pottery", created_at=created),
        Node("new", "plant", "Fresh Idea", created_at=NOW - timedelta(days=2)),
    ]
    edges = [Edge("job", "goal")]
    logs = [
        LogEntry(NOW - timedelta(days=40), 60, course_name="pottery"),
        LogEntry(NOW - timedelta(days=20), 30, node_id="hobby"),
    ]
    return nodes, edges, logs


def test_last_activity_picks_latest_match():
    nodes, _, logs = sample_snapshot()
    assert last_activity(nodes[2], logs) == NOW - timedelta(days=20)
    assert last_activity(nodes[0], logs) is None


def test_node_vitality_states():
    nodes, edges, logs = sample_snapshot()
    states = node_vitality(nodes, edges, logs, TimeWindow("W"), now=NOW)

    assert states["job"].is_active
    assert states["goal"].is_active
    assert states["goal"].flow > 0

    hobby = states["hobby"]
    assert not hobby.is_active
    assert hobby.has_history
    assert hobby.going_dormant
    assert hobby.days_since_activity == 20

    fresh = states["new"]
    assert not fresh.is_active
    assert not fresh.has_history
    assert not fresh.going_dormant
    assert fresh.days_since_activity == NO_ACTIVITY_DAYS


def test_nodes_without_creation_date_count_as_old():
    node = Node("old", "bed", "Forgotten")
    states = node_vitality([node], [], [], TimeWindow("M"), now=NOW)
    assert states["old"].going_dormant


def test_node_vitality_uses_the_same_pass_budget_as_the_flow():
    nodes = [Node("n0", "source", "Seed", roots=(Root("Retro", 1),), created_at=NOW - timedelta(days=30))]
    nodes += [Node(f"n{i}", "bed", f"Step {i}", created_at=NOW - timedelta(days=30)) for i in range(1, 8)]
    edges = [Edge(f"n{i}", f"n{i + 1}") for i in range(7)]

    flow = calculate_flow(nodes, edges, [], TimeWindow("W"), now=NOW, passes=8)
    states = node_vitality(nodes, edges, [], TimeWindow("W"), now=NOW, passes=8)

    assert flow.node_inflow["n7"] == 60.0
    assert states["n7"].flow == 60.0
    assert states["n7"].is_active
    assert not states["n7"].going_dormant

    settled = node_vitality(nodes, edges, [], TimeWindow("W"), now=NOW, passes=50, tolerance=0.0)
    assert settled["n7"].flow == 60.0
