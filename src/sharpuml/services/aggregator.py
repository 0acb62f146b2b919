"""Bundles per-project classes with the project's declared references."""

from collections.abc import Iterable, Sequence
from typing import Optional

from ..logging import get_logger
from ..models.descriptors import ClassDescriptor, ProjectDependency
from .solution import ProjectHandle, project_references

logger = get_logger(__name__)


class ProjectDependencyAggregator:
    """
    Builds the ProjectDependency entries consumed by the diagram generator.

    Reference names, package names and the target framework are taken
    verbatim from the project file, in their original order.
    """

    def aggregate(
        self,
        handle: ProjectHandle,
        classes: Optional[Sequence[ClassDescriptor]] = None,
    ) -> ProjectDependency:
        """
        Combine one project's classes with its references.

        Args:
            handle: Opened project file
            classes: Top-level classes extracted from the project

        Returns:
            ProjectDependency for the project
        """
        dependency = ProjectDependency(
            project_name=handle.name,
            project_path=str(handle.path),
            target_framework=handle.target_framework,
            package_references=tuple(handle.package_references),
            project_references=tuple(project_references(handle)),
            classes=tuple(classes or ()),
        )
        logger.debug(
            f"Aggregated project {handle.name}",
            extra={
                "classes": len(dependency.classes),
                "project_references": len(dependency.project_references),
                "package_references": len(dependency.package_references),
            },
        )
        return dependency

    def combine(
        self, entries: Iterable[tuple[ProjectHandle, Sequence[ClassDescriptor]]]
    ) -> list[ProjectDependency]:
        """Aggregate several projects, keeping their order."""
        return [self.aggregate(handle, classes) for handle, classes in entries]
