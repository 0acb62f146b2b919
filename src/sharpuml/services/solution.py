"""
Solution and Project File Reader.

Discovers which projects a Visual Studio solution contains and what each
project declares: target framework, package references, project
references and source files. Project files are read as plain MSBuild XML;
nothing is evaluated, imported or restored, and every value is passed
through verbatim.

Example:
    for project_path in list_project_files(Path("Shop.sln")):
        handle = open_project(project_path)
        if handle is not None:
            print(handle.name, project_references(handle))

Author: SharpUML Team
"""

import fnmatch
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path, PureWindowsPath
from typing import Optional, Union

from ..config import AnalysisConfig, get_config
from ..constants import PROJECT_EXTENSION
from ..logging import get_logger

logger = get_logger(__name__)

# Project("{type-guid}") = "Name", "relative\path.csproj", "{project-guid}"
_PROJECT_LINE_PATTERN = re.compile(
    r'Project\("\{[^}]+\}"\)\s*=\s*"([^"]+)"\s*,\s*"([^"]+)"\s*,\s*"\{[^}]+\}"',
    re.MULTILINE,
)


@dataclass
class ProjectHandle:
    """
    An opened ``.csproj`` file.

    Attributes:
        name: Project name (file stem of the project file)
        path: Absolute path of the project file
        directory: Directory containing the project file
        target_framework: TargetFramework or TargetFrameworks, verbatim
        package_references: PackageReference names in file order
        project_reference_paths: ProjectReference paths in file order,
                                 exactly as written (may use backslashes)
        source_files: Source files that belong to the project, sorted
    """

    name: str
    path: Path
    directory: Path
    target_framework: str = ""
    package_references: list[str] = field(default_factory=list)
    project_reference_paths: list[str] = field(default_factory=list)
    source_files: list[Path] = field(default_factory=list)


def _strip_namespace(tag: str) -> str:
    """'{http://schemas.microsoft.com/developer/msbuild/2003}Project' -> 'Project'"""
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag


def _local_findall_recursive(element: ET.Element, local_name: str) -> list[ET.Element]:
    return [node for node in element.iter() if _strip_namespace(node.tag) == local_name]


def _first_text(root: ET.Element, *local_names: str) -> str:
    for local_name in local_names:
        for node in _local_findall_recursive(root, local_name):
            if node.text and node.text.strip():
                return node.text.strip()
    return ""


def _normalize_separators(path_text: str) -> str:
    return path_text.replace("\\", "/")


def list_project_files(solution_path: Union[str, Path]) -> list[Path]:
    """
    List the C# project files of a solution.

    A ``.csproj`` path given directly yields itself. Entries that do not
    exist or are not ``.csproj`` files (solution folders, other project
    types) are logged and skipped.

    Args:
        solution_path: Path to a ``.sln`` or ``.csproj`` file

    Returns:
        Absolute project file paths in solution order; empty if the
        solution cannot be read
    """
    path = Path(solution_path).resolve()

    if path.suffix.lower() == PROJECT_EXTENSION:
        if path.is_file():
            return [path]
        logger.warning("Project file not found", extra={"project_path": str(path)})
        return []

    try:
        content = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(
            f"Failed to read solution: {e}",
            extra={"solution_path": str(path)},
        )
        return []

    projects = []
    for match in _PROJECT_LINE_PATTERN.finditer(content):
        project_name, relative_path = match.group(1), match.group(2)
        project_path = (path.parent / _normalize_separators(relative_path)).resolve()

        if project_path.is_file() and project_path.suffix.lower() == PROJECT_EXTENSION:
            logger.info(
                f"Found project: {project_name}",
                extra={"project_path": str(project_path)},
            )
            projects.append(project_path)
        else:
            logger.warning(
                "Project file not found or not a .csproj",
                extra={"project_path": str(project_path)},
            )

    return projects


def _is_excluded(relative: Path, excluded_directories: set[str], removed_patterns: list[str]) -> bool:
    if any(part in excluded_directories for part in relative.parts[:-1]):
        return True
    relative_text = relative.as_posix()
    return any(fnmatch.fnmatch(relative_text, pattern) for pattern in removed_patterns)


def _collect_source_files(
    directory: Path, removed_patterns: list[str], config: AnalysisConfig
) -> list[Path]:
    excluded_directories = set(config.excluded_directories)
    files = set()
    for extension in config.source_extensions:
        for candidate in directory.rglob(f"*{extension}"):
            if not candidate.is_file():
                continue
            if _is_excluded(candidate.relative_to(directory), excluded_directories, removed_patterns):
                continue
            files.add(candidate)
    return sorted(files)


def open_project(
    project_path: Union[str, Path], config: Optional[AnalysisConfig] = None
) -> Optional[ProjectHandle]:
    """
    Read a ``.csproj`` file.

    Args:
        project_path: Path to the project file
        config: Source discovery settings. Defaults to the global config.

    Returns:
        ProjectHandle, or None if the file cannot be read or parsed
    """
    config = config or get_config().analysis
    path = Path(project_path).resolve()

    try:
        root = ET.fromstring(path.read_text(encoding="utf-8-sig"))
    except (OSError, UnicodeDecodeError, ET.ParseError) as e:
        logger.warning(
            f"Failed to load project: {e}",
            extra={"project_path": str(path)},
        )
        return None

    package_references = [
        node.get("Include") for node in _local_findall_recursive(root, "PackageReference")
        if node.get("Include")
    ]
    project_reference_paths = [
        node.get("Include") for node in _local_findall_recursive(root, "ProjectReference")
        if node.get("Include")
    ]
    removed_patterns = [
        _normalize_separators(pattern.strip())
        for node in _local_findall_recursive(root, "Compile")
        for pattern in (node.get("Remove") or "").split(";")
        if pattern.strip()
    ]

    handle = ProjectHandle(
        name=path.stem,
        path=path,
        directory=path.parent,
        target_framework=_first_text(root, "TargetFramework", "TargetFrameworks"),
        package_references=package_references,
        project_reference_paths=project_reference_paths,
        source_files=_collect_source_files(path.parent, removed_patterns, config),
    )

    logger.debug(
        f"Opened project {handle.name}",
        extra={
            "target_framework": handle.target_framework,
            "source_files": len(handle.source_files),
        },
    )
    return handle


def project_references(handle: ProjectHandle) -> list[str]:
    """Names of the projects this project references, in file order."""
    return [
        PureWindowsPath(reference).stem
        for reference in handle.project_reference_paths
    ]
