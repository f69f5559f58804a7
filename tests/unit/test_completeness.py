from flowlint.completeness import check_completeness
from flowlint.manifest import decode_manifest
from flowlint.parser import parse_mermaid
from flowlint.report import format_completeness, format_coverage_line

DIAGRAM = """flowchart LR
    subgraph svc1 ["Order Service (gRPC)"]
        API[Order Service (gRPC)]
        VAL[Validate cart]
    end
    PAY[[Payment Service]]
    DB[(orders db)]
    API ==> PAY
    API --> DB
"""


def manifest(*services):
    return decode_manifest({"services": list(services)})


def test_label_containment_ignores_case():
    report = check_completeness(
        parse_mermaid(DIAGRAM),
        manifest(
            {
                "name": "Order Service",
                "dependencies": {"sync": [{"name": "payment service", "type": "grpc"}]},
                "databases": [{"name": "Orders DB"}],
            }
        ),
    )
    assert (report.found, report.total) == (2, 2)
    assert report.complete
    assert format_coverage_line(report) == "Coverage: 2/2 (100%)"


def test_missing_topic_is_reported():
    report = check_completeness(
        parse_mermaid("flowchart LR\nA[Order API]"),
        manifest(
            {
                "name": "Order Service",
                "dependencies": {
                    "async": [
                        {
                            "name": "order.created",
                            "direction": "produces",
                            "source_file": "events.go",
                            "source_line": 12,
                        }
                    ]
                },
            }
        ),
    )
    assert not report.complete
    assert format_coverage_line(report) == "Coverage: 0/1 (0%)"
    (item,) = report.missing
    assert item.category == "kafka"
    assert item.describe() == "Order Service > order.created (kafka produces, from events.go:12)"


def test_names_shared_by_services_are_counted_per_service():
    shared = {"name": "Redis", "purpose": "sessions"}
    report = check_completeness(
        parse_mermaid("R(Redis)"),
        manifest({"name": "A", "caches": [shared]}, {"name": "B", "caches": [shared]}),
    )
    assert (report.found, report.total) == (2, 2)
    assert [item.service for item in report.items] == ["A", "B"]


def test_sections_follow_category_order_and_internal_steps_are_optional():
    report = check_completeness(
        parse_mermaid(DIAGRAM),
        manifest(
            {"name": "Order Service", "internal_steps": [{"name": "Validate cart"}]},
            {"name": "Payment Service"},
        ),
    )
    first, second = report.services
    assert [s.heading for s in first.sections] == [
        "Sync Dependencies",
        "Kafka Topics",
        "Databases",
        "Caches",
        "External Systems",
        "Internal Steps",
    ]
    assert [s.heading for s in second.sections][-1] == "External Systems"
    assert report.items[0].category == "internal"
    assert report.complete


def test_empty_manifest_entries():
    report = check_completeness(parse_mermaid(DIAGRAM), manifest({"name": "Lonely"}))
    assert report.total == 0
    assert report.complete
    assert report.percent == 0.0
    assert format_coverage_line(report) == "Coverage: 0/0 (no dependencies)"


def test_format_completeness():
    report = check_completeness(
        parse_mermaid(DIAGRAM),
        manifest(
            {
                "name": "Order Service",
                "dependencies": {
                    "sync": [{"name": "Payment Service"}],
                    "async": [{"name": "order.created", "direction": "produces"}],
                },
                "external": [{"name": "Stripe", "type": "http"}],
            }
        ),
    )
    lines = format_completeness(report)
    assert lines[:3] == ["Service: Order Service", "-" * 40, "  Sync Dependencies:"]
    assert "    ✓ Payment Service" in lines
    assert "    ✗ order.created (produces) (MISSING)" in lines
    assert "    ✗ Stripe (MISSING)" in lines
    assert "Coverage: 1/3 (33%)" in lines
    assert lines[-3:] == [
        "Missing items:",
        "  - Order Service > order.created (kafka produces)",
        "  - Order Service > Stripe (external)",
    ]


def test_format_complete_report():
    report = check_completeness(
        parse_mermaid(DIAGRAM),
        manifest({"name": "Order Service", "databases": [{"name": "orders DB"}]}),
    )
    lines = format_completeness(report)
    assert lines[-2:] == ["Coverage: 1/1 (100%)", "Diagram is complete"]
