"""
Tests for solution and project file reading.

Tests cover:
- .sln parsing with existing, missing and non-C# entries
- Direct .csproj input and unreadable solutions
- .csproj parsing with and without the MSBuild XML namespace
- Source file discovery with excluded directories and Compile Remove
- Project reference names

Author: SharpUML Team
"""

from pathlib import Path
from textwrap import dedent

import pytest

from sharpuml.config import AnalysisConfig, reset_config
from sharpuml.services.solution import (
    ProjectHandle,
    list_project_files,
    open_project,
    project_references,
)

SOLUTION = dedent('''
    Microsoft Visual Studio Solution File, Format Version 12.00
    # Visual Studio Version 17
    Project("{FAE04EC0-301F-11D3-BF4B-00C04F79EFBC}") = "Core", "src\\Core\\Core.csproj", "{11111111-1111-1111-1111-111111111111}"
    EndProject
    Project("{2150E333-8FDC-42A3-9474-1A3956D46DE8}") = "Solution Items", "Solution Items", "{22222222-2222-2222-2222-222222222222}"
    EndProject
    Project("{FAE04EC0-301F-11D3-BF4B-00C04F79EFBC}") = "Web", "src\\Web\\Web.csproj", "{33333333-3333-3333-3333-333333333333}"
    EndProject
    Project("{FAE04EC0-301F-11D3-BF4B-00C04F79EFBC}") = "Gone", "src\\Gone\\Gone.csproj", "{44444444-4444-4444-4444-444444444444}"
    EndProject
''').lstrip()

CORE_PROJECT = dedent('''
    <Project Sdk="Microsoft.NET.Sdk">
      <PropertyGroup>
        <TargetFramework>net8.0</TargetFramework>
      </PropertyGroup>
      <ItemGroup>
        <PackageReference Include="Serilog" Version="3.1.1" />
        <PackageReference Include="Newtonsoft.Json" Version="13.0.3" />
      </ItemGroup>
      <ItemGroup>
        <Compile Remove="Legacy/**" />
      </ItemGroup>
    </Project>
''').strip()

WEB_PROJECT = dedent('''
    <?xml version="1.0" encoding="utf-8"?>
    <Project ToolsVersion="15.0" xmlns="http://schemas.microsoft.com/developer/msbuild/2003">
      <PropertyGroup>
        <TargetFrameworks>net6.0;net8.0</TargetFrameworks>
      </PropertyGroup>
      <ItemGroup>
        <ProjectReference Include="..\\Core\\Core.csproj" />
        <ProjectReference Include="../Data/Shop.Data.csproj" />
      </ItemGroup>
    </Project>
''').strip()


@pytest.fixture(autouse=True)
def reset_config_fixture():
    """Reset config before and after each test."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def solution_dir(tmp_path):
    """A solution with Core and Web projects on disk."""
    (tmp_path / "Shop.sln").write_text(SOLUTION)

    core = tmp_path / "src" / "Core"
    core.mkdir(parents=True)
    (core / "Core.csproj").write_text(CORE_PROJECT)
    (core / "Order.cs").write_text("public class Order {}")
    (core / "Domain").mkdir()
    (core / "Domain" / "Customer.cs").write_text("public class Customer {}")
    (core / "Legacy").mkdir()
    (core / "Legacy" / "Old.cs").write_text("public class Old {}")
    (core / "obj").mkdir()
    (core / "obj" / "AssemblyInfo.cs").write_text("// generated")
    (core / "bin" / "Debug").mkdir(parents=True)
    (core / "bin" / "Debug" / "Copy.cs").write_text("// copied")
    (core / "notes.txt").write_text("not source")

    web = tmp_path / "src" / "Web"
    web.mkdir(parents=True)
    (web / "Web.csproj").write_text(WEB_PROJECT)
    (web / "Program.cs").write_text("public class Program {}")

    return tmp_path


class TestListProjectFiles:
    """Tests for list_project_files."""

    def test_solution_projects(self, solution_dir):
        """Test existing .csproj entries are returned in solution order."""
        projects = list_project_files(solution_dir / "Shop.sln")

        assert projects == [
            (solution_dir / "src" / "Core" / "Core.csproj").resolve(),
            (solution_dir / "src" / "Web" / "Web.csproj").resolve(),
        ]

    def test_accepts_string_path(self, solution_dir):
        """Test a string path works like a Path."""
        assert len(list_project_files(str(solution_dir / "Shop.sln"))) == 2

    def test_project_file_yields_itself(self, solution_dir):
        """Test a .csproj path is returned as the only project."""
        project = solution_dir / "src" / "Core" / "Core.csproj"

        assert list_project_files(project) == [project.resolve()]

    def test_missing_solution(self, tmp_path):
        """Test an unreadable solution yields no projects."""
        assert list_project_files(tmp_path / "Missing.sln") == []

    def test_missing_project_file(self, tmp_path):
        """Test a missing .csproj yields no projects."""
        assert list_project_files(tmp_path / "Missing.csproj") == []

    def test_solution_without_projects(self, tmp_path):
        """Test a solution with no project lines."""
        solution = tmp_path / "Empty.sln"
        solution.write_text("Microsoft Visual Studio Solution File, Format Version 12.00\n")

        assert list_project_files(solution) == []


class TestOpenProject:
    """Tests for open_project."""

    def test_sdk_project(self, solution_dir):
        """Test target framework and packages of an SDK-style project."""
        handle = open_project(solution_dir / "src" / "Core" / "Core.csproj")

        assert handle.name == "Core"
        assert handle.directory == (solution_dir / "src" / "Core").resolve()
        assert handle.target_framework == "net8.0"
        assert handle.package_references == ["Serilog", "Newtonsoft.Json"]
        assert handle.project_reference_paths == []

    def test_namespaced_project(self, solution_dir):
        """Test the MSBuild XML namespace is ignored."""
        handle = open_project(solution_dir / "src" / "Web" / "Web.csproj")

        assert handle.target_framework == "net6.0;net8.0"
        assert handle.project_reference_paths == ["..\\Core\\Core.csproj", "../Data/Shop.Data.csproj"]

    def test_source_files(self, solution_dir):
        """Test bin, obj and Compile Remove globs are excluded."""
        handle = open_project(solution_dir / "src" / "Core" / "Core.csproj")
        core = (solution_dir / "src" / "Core").resolve()

        assert handle.source_files == sorted([core / "Domain" / "Customer.cs", core / "Order.cs"])

    def test_configured_exclusions(self, solution_dir):
        """Test excluded directories come from configuration."""
        config = AnalysisConfig(excluded_directories=["Domain"])

        handle = open_project(solution_dir / "src" / "Core" / "Core.csproj", config)
        names = [path.name for path in handle.source_files]

        assert "Customer.cs" not in names
        assert "AssemblyInfo.cs" in names

    def test_malformed_project(self, tmp_path):
        """Test invalid XML yields None."""
        project = tmp_path / "Broken.csproj"
        project.write_text("<Project><PropertyGroup>")

        assert open_project(project) is None

    def test_missing_project(self, tmp_path):
        """Test a missing file yields None."""
        assert open_project(tmp_path / "Nope.csproj") is None


class TestProjectReferences:
    """Tests for project_references."""

    def test_reference_names(self, solution_dir):
        """Test names are the project file stems in file order."""
        handle = open_project(solution_dir / "src" / "Web" / "Web.csproj")

        assert project_references(handle) == ["Core", "Shop.Data"]

    def test_no_references(self):
        """Test a handle without references."""
        handle = ProjectHandle(name="Core", path=Path("/src/Core/Core.csproj"), directory=Path("/src/Core"))

        assert project_references(handle) == []
