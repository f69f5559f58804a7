# flowlint/manifest.py
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import ManifestDecodeError
from .io import load_yaml_mapping
from .model import as_int

ASYNC_DIRECTIONS = ("produces", "consumes")


@dataclass(frozen=True)
class Dependency:
    """A declared dependency of one service.

    `kind` is only meaningful for sync (gRPC/HTTP) and external entries,
    `direction` only for async ones, `purpose` only for caches.
    """

    name: str
    kind: str = ""
    direction: str = ""
    purpose: str = ""
    source_file: str = ""
    source_line: int = 0

    @property
    def provenance(self) -> str:
        if self.source_file and self.source_line:
            return f"{self.source_file}:{self.source_line}"
        return self.source_file


@dataclass(frozen=True)
class InternalStep:
    name: str
    description: str = ""


@dataclass(frozen=True)
class Entrypoint:
    type: str
    name: str
    methods: tuple[str, ...] = ()


@dataclass(frozen=True)
class Documentation:
    runbook: str = ""
    architecture: str = ""
    notes: str = ""


@dataclass(frozen=True)
class ServiceRecord:
    name: str
    target_path: str = ""
    description: str = ""
    documentation: Documentation = field(default_factory=Documentation)
    entrypoints: tuple[Entrypoint, ...] = ()
    sync_dependencies: tuple[Dependency, ...] = ()
    async_dependencies: tuple[Dependency, ...] = ()
    databases: tuple[Dependency, ...] = ()
    caches: tuple[Dependency, ...] = ()
    externals: tuple[Dependency, ...] = ()
    internal_steps: tuple[InternalStep, ...] = ()


@dataclass(frozen=True)
class Manifest:
    services: tuple[ServiceRecord, ...]
    generated: str = ""


def _str(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _list(value: Any, path: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ManifestDecodeError("expected a list", path)
    return value


def _mapping(value: Any, path: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ManifestDecodeError("expected a mapping", path)
    return value


def _name(item: dict[str, Any], path: str) -> str:
    name = item.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ManifestDecodeError("missing string `name`", f"{path}/name")
    return name


def _dependencies(items: Any, path: str, *, category: str) -> tuple[Dependency, ...]:
    out: list[Dependency] = []
    for i, raw in enumerate(_list(items, path)):
        item_path = f"{path}/{i}"
        item = _mapping(raw, item_path)
        direction = ""
        if category == "async":
            direction = _str(item.get("direction"))
            if direction and direction not in ASYNC_DIRECTIONS:
                raise ManifestDecodeError(
                    f"async direction must be one of {', '.join(ASYNC_DIRECTIONS)}, "
                    f"got {direction!r}",
                    f"{item_path}/direction",
                )
        out.append(
            Dependency(
                name=_name(item, item_path),
                kind=_str(item.get("type")),
                direction=direction,
                purpose=_str(item.get("purpose")),
                source_file=_str(item.get("source_file")),
                source_line=as_int(item.get("source_line")),
            )
        )
    return tuple(out)


def _entrypoints(items: Any, path: str) -> tuple[Entrypoint, ...]:
    out: list[Entrypoint] = []
    for i, raw in enumerate(_list(items, path)):
        item = _mapping(raw, f"{path}/{i}")
        methods = _list(item.get("methods"), f"{path}/{i}/methods")
        out.append(
            Entrypoint(
                type=_str(item.get("type")),
                name=_str(item.get("name")),
                methods=tuple(_str(m) for m in methods),
            )
        )
    return tuple(out)


def _service(raw: Any, path: str) -> ServiceRecord:
    item = _mapping(raw, path)
    deps = item.get("dependencies") or {}
    deps = _mapping(deps, f"{path}/dependencies")
    docs = _mapping(item.get("documentation") or {}, f"{path}/documentation")

    steps: list[InternalStep] = []
    for i, step_raw in enumerate(_list(item.get("internal_steps"), f"{path}/internal_steps")):
        step_path = f"{path}/internal_steps/{i}"
        step = _mapping(step_raw, step_path)
        steps.append(
            InternalStep(name=_name(step, step_path), description=_str(step.get("description")))
        )

    return ServiceRecord(
        name=_name(item, path),
        target_path=_str(item.get("target_path")),
        description=_str(item.get("description")),
        documentation=Documentation(
            runbook=_str(docs.get("runbook")),
            architecture=_str(docs.get("architecture")),
            notes=_str(docs.get("notes")),
        ),
        entrypoints=_entrypoints(item.get("entrypoints"), f"{path}/entrypoints"),
        sync_dependencies=_dependencies(
            deps.get("sync"), f"{path}/dependencies/sync", category="sync"
        ),
        async_dependencies=_dependencies(
            deps.get("async"), f"{path}/dependencies/async", category="async"
        ),
        databases=_dependencies(item.get("databases"), f"{path}/databases", category="database"),
        caches=_dependencies(item.get("caches"), f"{path}/caches", category="cache"),
        externals=_dependencies(item.get("external"), f"{path}/external", category="external"),
        internal_steps=tuple(steps),
    )


def decode_manifest(data: dict[str, Any]) -> Manifest:
    """Decode a loaded dependencies document; fails if it declares no services."""
    services = _list(data.get("services"), "/services")
    if not services:
        raise ManifestDecodeError("no services found in dependencies file", "/services")

    return Manifest(
        services=tuple(_service(raw, f"/services/{i}") for i, raw in enumerate(services)),
        generated=_str(data.get("generated")),
    )


def load_manifest(path: Path) -> Manifest:
    """Load and decode a dependencies YAML file."""
    return decode_manifest(load_yaml_mapping(path))
