from __future__ import annotations

from dataclasses import dataclass, field

from .manifest import Dependency, Manifest, ServiceRecord
from .model import Diagram

# (attribute on ServiceRecord, category shown in reports, heading)
CATEGORIES: tuple[tuple[str, str, str], ...] = (
    ("sync_dependencies", "sync", "Sync Dependencies"),
    ("async_dependencies", "kafka", "Kafka Topics"),
    ("databases", "database", "Databases"),
    ("caches", "cache", "Caches"),
    ("externals", "external", "External Systems"),
)
INTERNAL_STEPS_HEADING = "Internal Steps"


@dataclass(frozen=True)
class CoverageItem:
    service: str
    category: str
    name: str
    found: bool
    direction: str = ""
    provenance: str = ""

    def describe(self) -> str:
        """One-line description used in the missing-items list."""
        kind = self.category
        if self.category == "kafka" and self.direction:
            kind = f"kafka {self.direction}"
        elif self.category == "internal":
            kind = "internal step"
        if self.provenance:
            return f"{self.service} > {self.name} ({kind}, from {self.provenance})"
        return f"{self.service} > {self.name} ({kind})"


@dataclass(frozen=True)
class CoverageSection:
    heading: str
    items: tuple[CoverageItem, ...]


@dataclass(frozen=True)
class ServiceCoverage:
    name: str
    sections: tuple[CoverageSection, ...]


@dataclass
class CompletenessReport:
    services: list[ServiceCoverage] = field(default_factory=list)

    @property
    def items(self) -> list[CoverageItem]:
        return [
            item
            for svc in self.services
            for section in svc.sections
            for item in section.items
        ]

    @property
    def total(self) -> int:
        return len(self.items)

    @property
    def found(self) -> int:
        return sum(1 for item in self.items if item.found)

    @property
    def missing(self) -> list[CoverageItem]:
        return [item for item in self.items if not item.found]

    @property
    def complete(self) -> bool:
        return not self.missing

    @property
    def percent(self) -> float:
        if not self.total:
            return 0.0
        return self.found / self.total * 100


def _dependency_item(
    diagram: Diagram, service: str, category: str, dep: Dependency
) -> CoverageItem:
    return CoverageItem(
        service=service,
        category=category,
        name=dep.name,
        found=diagram.has_node_with_label(dep.name),
        direction=dep.direction,
        provenance=dep.provenance,
    )


def _service_coverage(diagram: Diagram, svc: ServiceRecord) -> ServiceCoverage:
    sections: list[CoverageSection] = []
    for attr, category, heading in CATEGORIES:
        deps: tuple[Dependency, ...] = getattr(svc, attr)
        sections.append(
            CoverageSection(
                heading=heading,
                items=tuple(_dependency_item(diagram, svc.name, category, d) for d in deps),
            )
        )

    # Internal steps are optional; services without them get no section.
    if svc.internal_steps:
        sections.append(
            CoverageSection(
                heading=INTERNAL_STEPS_HEADING,
                items=tuple(
                    CoverageItem(
                        service=svc.name,
                        category="internal",
                        name=step.name,
                        found=diagram.has_node_with_label(step.name),
                    )
                    for step in svc.internal_steps
                ),
            )
        )
    return ServiceCoverage(name=svc.name, sections=tuple(sections))


def check_completeness(diagram: Diagram, manifest: Manifest) -> CompletenessReport:
    """Cross-check every declared name against the diagram's node labels.

    A name declared under several services is checked, and counted, once per
    service.
    """
    return CompletenessReport(
        services=[_service_coverage(diagram, svc) for svc in manifest.services]
    )
