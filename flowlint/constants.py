from __future__ import annotations

DIRECTIONS: tuple[str, ...] = ("LR", "TD", "TB", "RL", "BT")

# Recognized flowchart arrows; longer tokens first so `-.->` wins over `-.-`.
ARROWS: tuple[str, ...] = ("-->", "==>", "-.->", "-.-", "--")

SYNC_ARROW = "==>"
ASYNC_ARROW = "-.->"

# Shape delimiters as (open, close, shape). Longest open token first.
SHAPES: tuple[tuple[str, str, str], ...] = (
    ("[[", "]]", "double_rectangle"),
    ("[(", ")]", "cylinder"),
    ("([", "])", "stadium"),
    ("((", "))", "circle"),
    ("[", "]", "rectangle"),
    ("(", ")", "rounded"),
    ("{", "}", "diamond"),
)

ASYNC_KEYWORDS: tuple[str, ...] = (
    "kafka",
    "publish",
    "consume",
    "queue",
    "rabbitmq",
    "sqs",
    "pubsub",
)

SYNC_KEYWORDS: tuple[str, ...] = ("grpc", "http", "rest", "sql", "cache", "redis")

REQUIRED_CLASSES: tuple[str, ...] = ("service", "kafka", "database", "external")

# (abbreviation, full word). `api` is accepted and deliberately absent.
ABBREVIATIONS: tuple[tuple[str, str], ...] = (
    ("svc", "Service"),
    ("srv", "Server"),
    ("msg", "Message"),
    ("req", "Request"),
    ("res", "Response"),
    ("cfg", "Config"),
    ("db", "Database"),
)

# Default styles injected for missing classDefs: name -> (fill, stroke, color).
CLASS_PALETTE: dict[str, tuple[str, str, str]] = {
    "service": ("#228be6", "#1971c2", "#fff"),
    "entry": ("#40c057", "#2f9e44", "#fff"),
    "kafka": ("#12b886", "#099268", "#fff"),
    "database": ("#fab005", "#f59f00", "#000"),
    "cache": ("#be4bdb", "#9c36b5", "#fff"),
    "external": ("#868e96", "#495057", "#fff"),
}

# Complexity heuristics.
MAX_UNGROUPED_NODES = 10
MIN_SUBGRAPHS_FOR_LARGE = 2
MAX_EDGE_DENSITY = 2.0
FAN_OUT_THRESHOLD = 3
MAX_FAN_OUT_NODES = 2
HUB_CHECK_MIN_NODES = 8
HUB_MIN_CONNECTIONS = 3

# Physical lines a wrapped label may span before the parser gives up on it.
MAX_CONTINUATION_LINES = 8

MERMAID_CLI_PACKAGE = "@mermaid-js/mermaid-cli"
MERMAID_CLI_ENV = "MERMAID_CLI"
VALIDATOR_TIMEOUT_DEFAULT = 120.0
