from datetime import datetime

from lifemap_flow.flow import calculate_flow
from lifemap_flow.report import flow_report, format_hours, leaf_magnitude
from lifemap_flow.schema import Edge, Node, Root, TimeWindow


def test_format_hours():
    assert format_hours(0) == "0h"
    assert format_hours(0.5) == "0h"
    assert format_hours(90) == "1.5h"
    assert format_hours(120) == "2h"
    assert format_hours(61) == "1h"


def test_leaf_magnitude():
    assert leaf_magnitude(0, 100) == 0
    assert leaf_magnitude(10, 100) == 1
    assert leaf_magnitude(55, 100) == 3
    assert leaf_magnitude(100, 100) == 5


def test_flow_report_rows():
    nodes = [
        Node("a", "bed", "Leaf", roots=(Root("Retro", 1),)),
        Node("b", "hub", "Top", roots=(Root("Retro", 2),)),
        Node("q", "question", "Maybe?"),
    ]
    result = calculate_flow(nodes, [Edge("a", "b")], [], TimeWindow("W"), now=datetime(2025, 6, 15))
    report = flow_report(nodes, result)

    assert [row["id"] for row in report["nodes"]] == ["b", "a", "q"]
    top = report["nodes"][0]
    assert top["inflow_minutes"] == 180
    assert top["inflow_hours"] == "3h"
    assert top["magnitude"] == 5
    assert report["edges"] == [{"edge": "a-b", "flow_minutes": 60, "flow_hours": "1h"}]
    assert report["total_inflow_minutes"] == 240
    assert report["passes"] == 5
