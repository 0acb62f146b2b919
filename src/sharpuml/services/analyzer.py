"""
Solution Analysis Driver.

Runs the pipeline for every project of a solution:

    list_project_files → open_project → extract_classes → combine

Project load failures are logged and the project is left out. Cancellation
is cooperative: the event is checked before the run and before each
project, and once it is observed the whole result is empty.

Author: SharpUML Team
"""

import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional, Union

from ..config import Config, get_config
from ..logging import get_logger, log_operation_end, log_operation_start
from ..models.descriptors import ClassDescriptor, ProjectDependency
from ..parsers.csharp_parser import extract_classes, initialize_frontend
from .aggregator import ProjectDependencyAggregator
from .solution import ProjectHandle, list_project_files, open_project

logger = get_logger(__name__)

ClassExtractor = Callable[
    [ProjectHandle, Optional[threading.Event], Optional[Config]],
    tuple[list[ClassDescriptor], list[str]],
]


def _cancelled(cancel_event: Optional[threading.Event]) -> bool:
    return cancel_event is not None and cancel_event.is_set()


class DependencyAnalyzer:
    """
    Analyzes a solution into ProjectDependency entries.

    Args:
        config: Configuration to use. Defaults to the global config.
        aggregator: Combines project metadata with extracted classes.
        extractor: Class extraction function, ``extract_classes`` by default.

    Example:
        analyzer = DependencyAnalyzer()
        dependencies = analyzer.analyze(Path("Shop.sln"))
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        aggregator: Optional[ProjectDependencyAggregator] = None,
        extractor: Optional[ClassExtractor] = None,
    ):
        self.config = config or get_config()
        self.aggregator = aggregator or ProjectDependencyAggregator()
        self.extractor = extractor or extract_classes

    def analyze(
        self,
        solution_path: Union[str, Path],
        cancel_event: Optional[threading.Event] = None,
    ) -> list[ProjectDependency]:
        """
        Analyze every C# project of a solution.

        Args:
            solution_path: Path to a ``.sln`` (or a single ``.csproj``)
            cancel_event: Cooperative cancellation signal

        Returns:
            One entry per loaded project in solution order, or an empty
            list if cancellation was observed

        Raises:
            RuntimeError: If the C# front end cannot be initialized
        """
        if _cancelled(cancel_event):
            logger.info("Analysis cancelled before start")
            return []

        start_time = log_operation_start(logger, "Solution analysis", solution_path=str(solution_path))

        project_files = list_project_files(solution_path)
        initialize_frontend()

        max_workers = self.config.analysis.max_workers
        if max_workers > 1 and len(project_files) > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                futures = [
                    executor.submit(self._analyze_project, project_file, cancel_event)
                    for project_file in project_files
                ]
                results = [future.result() for future in futures]
        else:
            results = []
            for project_file in project_files:
                if _cancelled(cancel_event):
                    break
                results.append(self._analyze_project(project_file, cancel_event))

        if _cancelled(cancel_event):
            logger.info("Analysis cancelled", extra={"solution_path": str(solution_path)})
            return []

        dependencies = self.aggregator.combine(result for result in results if result is not None)
        log_operation_end(
            logger, "Solution analysis", start_time,
            projects=len(dependencies),
            classes=sum(len(dependency.classes) for dependency in dependencies),
        )
        return dependencies

    def _analyze_project(
        self, project_file: Path, cancel_event: Optional[threading.Event]
    ) -> Optional[tuple[ProjectHandle, list[ClassDescriptor]]]:
        if _cancelled(cancel_event):
            return None

        try:
            handle = open_project(project_file, self.config.analysis)
            if handle is None:
                return None

            classes, errors = self.extractor(handle, cancel_event, self.config)
            if errors:
                logger.warning(
                    f"{len(errors)} source files could not be parsed",
                    extra={"project": handle.name},
                )
            return handle, classes
        except Exception as e:
            logger.warning(
                f"Failed to analyze project: {e}",
                extra={"project_path": str(project_file)},
            )
            return None
