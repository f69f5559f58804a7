import pytest

from flowlint.parser import parse_mermaid

ORDER_FLOW = """flowchart LR
    %% entry points
    classDef service fill:#228be6,stroke:#1971c2,color:#fff
    classDef database fill:#fab005,stroke:#f59f00,color:#000

    subgraph svc1 ["Order Service"]
        API[Order API]
        DB[(Orders DB)]
    end

    subgraph ext [Payments]
        PAY[[Stripe]]
    end

    API ==>|gRPC CreateCharge| PAY
    API -.->|kafka publish| TOPIC([order.created])
    API --> DB
    class API,PAY service
    class DB database
"""


def parse(code: str):
    return parse_mermaid(code)


def test_direction_first_declaration_wins():
    diagram = parse("flowchart TD\nflowchart LR\nA[One]")
    assert diagram.direction == "TD"
    assert list(diagram.nodes) == ["A"]


def test_missing_direction_is_none():
    assert parse("A[One]").direction is None


def test_full_document():
    diagram = parse(ORDER_FLOW)

    assert diagram.direction == "LR"
    assert set(diagram.class_defs) == {"service", "database"}
    assert diagram.class_defs["database"] == "fill:#fab005,stroke:#f59f00,color:#000"

    assert [sg.id for sg in diagram.subgraphs] == ["svc1", "ext"]
    svc1, ext = diagram.subgraphs
    assert (svc1.title, svc1.quoted, svc1.line) == ("Order Service", True, 6)
    assert svc1.nodes == ["API", "DB"]
    assert (ext.title, ext.quoted) == ("Payments", False)

    assert diagram.nodes["API"].shape == "rectangle"
    assert diagram.nodes["DB"].shape == "cylinder"
    assert diagram.nodes["DB"].label == "Orders DB"
    assert diagram.nodes["PAY"].shape == "double_rectangle"
    assert diagram.nodes["API"].subgraph == "svc1"
    assert diagram.nodes["PAY"].subgraph == "ext"

    assert diagram.nodes["API"].classes == ["service"]
    assert diagram.nodes["DB"].classes == ["database"]
    assert diagram.class_assignments["PAY"] == ["service"]

    arrows = [(e.src, e.arrow, e.label, e.dst) for e in diagram.edges]
    assert arrows == [
        ("API", "==>", "gRPC CreateCharge", "PAY"),
        ("API", "-.->", "kafka publish", "TOPIC"),
        ("API", "-->", "", "DB"),
    ]
    assert diagram.edges[0].line == 15


def test_edge_line_does_not_define_nodes():
    diagram = parse("flowchart LR\nA --> B")
    assert diagram.nodes == {}
    assert len(diagram.edges) == 1
    assert diagram.undefined_endpoints() == ["A", "B"]


@pytest.mark.parametrize(
    "line,shape,label",
    [
        ("N[Plain]", "rectangle", "Plain"),
        ("N[(Orders DB)]", "cylinder", "Orders DB"),
        ("N([Consumer group])", "stadium", "Consumer group"),
        ("N[[Stripe]]", "double_rectangle", "Stripe"),
        ("N{Valid?}", "diamond", "Valid?"),
        ("N((Start))", "circle", "Start"),
        ("N(Redis cache)", "rounded", "Redis cache"),
        ("N[(optional) step]", "rectangle", "(optional) step"),
    ],
)
def test_node_shapes(line, shape, label):
    node = parse(line).nodes["N"]
    assert node.shape == shape
    assert node.label == label


@pytest.mark.parametrize(
    "line,arrow",
    [
        ("A --> B", "-->"),
        ("A ==> B", "==>"),
        ("A -.-> B", "-.->"),
        ("A -.- B", "-.-"),
        ("A -- B", "--"),
        ("A-->B", "-->"),
    ],
)
def test_edge_arrows(line, arrow):
    (edge,) = parse(line).edges
    assert (edge.src, edge.dst, edge.arrow, edge.label) == ("A", "B", arrow, "")


def test_subgraph_title_forms():
    diagram = parse(
        "\n".join(
            [
                "subgraph a [Bracketed]",
                "end",
                'subgraph b "Quoted"',
                "end",
                'subgraph c ["Both"]',
                "end",
                "subgraph d",
                "end",
                "subgraph e Bare title",
                "end",
            ]
        )
    )
    got = [(sg.id, sg.title, sg.quoted) for sg in diagram.subgraphs]
    assert got == [
        ("a", "Bracketed", False),
        ("b", "Quoted", True),
        ("c", "Both", True),
        ("d", "", False),
        ("e", "Bare title", False),
    ]


def test_nested_subgraphs_innermost_owns_nodes():
    diagram = parse(
        "\n".join(
            [
                'subgraph outer ["Outer"]',
                "A[First]",
                'subgraph inner ["Inner"]',
                "B[Second]",
                "end",
                "C[Third]",
                "end",
                "D[Outside]",
            ]
        )
    )
    assert diagram.nodes["A"].subgraph == "outer"
    assert diagram.nodes["B"].subgraph == "inner"
    assert diagram.nodes["C"].subgraph == "outer"
    assert diagram.nodes["D"].subgraph is None
    assert diagram.subgraphs[0].nodes == ["A", "C"]


def test_duplicate_node_keeps_later_definition():
    diagram = parse("A[First label]\nB[Other]\nA[Second label]")
    assert list(diagram.nodes) == ["A", "B"]
    assert diagram.nodes["A"].label == "Second label"
    assert diagram.nodes["A"].line == 3


def test_class_shorthand_and_class_lines_merge():
    diagram = parse("A[Orders]:::service\nclass A, B critical\nclass A service")
    assert diagram.nodes["A"].classes == ["service", "critical"]
    assert diagram.class_assignments["B"] == ["critical"]


def test_wrapped_node_label_is_joined():
    diagram = parse("flowchart LR\n    X[Order\n    Service]\n    X --> Y")
    node = diagram.nodes["X"]
    assert node.label == "Order\n    Service"
    assert node.line == 2
    assert diagram.edges[0].line == 4


def test_wrapped_edge_label_and_subgraph_title():
    diagram = parse('subgraph s1 ["Order\nProcessing"]\nend\nA -->|first\nsecond| B')
    assert diagram.subgraphs[0].title == "Order\nProcessing"
    assert diagram.subgraphs[0].quoted is True
    assert diagram.edges[0].label == "first\nsecond"


def test_unclosed_label_does_not_swallow_following_lines():
    diagram = parse("A[Broken\n\nB[Fine]\nB --> C")
    assert "A" not in diagram.nodes
    assert diagram.nodes["B"].label == "Fine"
    assert len(diagram.edges) == 1


def test_comments_and_unknown_lines_are_skipped():
    diagram = parse("%% A[Hidden]\nstyle A fill:#f00\nwhat is this\nB[Shown]")
    assert list(diagram.nodes) == ["B"]


@pytest.mark.parametrize(
    "code",
    [
        "",
        "\n\n\n",
        "end\nend\nend",
        "subgraph",
        "[[[[((((",
        "A -->|unterminated",
        "classDef",
        "class ,,, x",
        "A[" + "x\n" * 50,
        "\x00\x01 ]]]) |||",
        "flowchart XY\nA ==> \nB{",
    ],
)
def test_parser_is_total(code):
    diagram = parse(code)
    assert diagram is not None


def test_has_node_with_label_is_case_insensitive_containment():
    diagram = parse("A[Order Service (gRPC)]\nB[payments]")
    assert diagram.has_node_with_label("Order Service")
    assert diagram.has_node_with_label("order service (grpc)")
    assert diagram.has_node_with_label("PAYMENTS")
    assert not diagram.has_node_with_label("Inventory")


def test_orphan_nodes():
    diagram = parse("A[One]\nB[Two]\nZ[Zombie]\nA --> B")
    assert [n.id for n in diagram.orphan_nodes()] == ["Z"]


def test_quoted_labels_with_pipes_do_not_join_lines():
    diagram = parse(
        'A["GET | POST"]\n'
        "B[Inventory Service]\n"
        "A --> B\n"
        'C["Users | Accounts"]\n'
        "B --> C"
    )
    assert set(diagram.nodes) == {"A", "B", "C"}
    assert diagram.nodes["A"].label == '"GET | POST"'
    assert [(e.src, e.dst) for e in diagram.edges] == [("A", "B"), ("B", "C")]
    assert diagram.nodes["C"].line == 4


def test_quoted_bracket_and_stray_quote_on_complete_lines():
    diagram = parse('A["list [x"]\nB[6" pipe]\nC[Next]\nA --> C')
    assert set(diagram.nodes) == {"A", "B", "C"}
    assert len(diagram.edges) == 1


def test_wrapped_label_next_to_complete_lines():
    diagram = parse('A["GET | POST"]\nX[Order\nService]\nB[Other]\nX --> B')
    assert set(diagram.nodes) == {"A", "X", "B"}
    assert diagram.nodes["X"].label == "Order\nService"
    assert diagram.nodes["B"].line == 4
