"""
Architectural tests: enforce layer boundaries.

These tests verify that the codebase maintains proper separation of concerns:
- formatters/ must be pure functions with no dependencies on adapters/ or tools/
- adapters/ must not depend on tools/ or formatters/
- tools/ wires everything together

This prevents accidental coupling that would make formatters hard to test.
"""

import ast
import sys
from pathlib import Path

import pytest

from tools import TOOL_NAMES

PROJECT_ROOT = Path(__file__).parent.parent.parent

# Layers and their forbidden imports
LAYER_RULES = {
    "formatters": {"adapters", "tools", "server"},
    "adapters": {"tools", "formatters", "server"},
    # tools can import anything except the MCP surface
    "tools": {"server", "mcp"},
}


def get_imports_from_file(filepath: Path) -> set[str]:
    """Extract all import names from a Python file."""
    try:
        with open(filepath) as f:
            tree = ast.parse(f.read(), filename=str(filepath))
    except SyntaxError:
        return set()

    imports = set()

    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                imports.add(alias.name.split(".")[0])
        elif isinstance(node, ast.ImportFrom):
            if node.module and node.level == 0:
                imports.add(node.module.split(".")[0])

    return imports


def get_python_files(directory: Path) -> list[Path]:
    """Get all Python files in a directory (non-recursive for top-level packages)."""
    if not directory.exists():
        return []
    return list(directory.glob("*.py"))


class TestLayerBoundaries:
    """Verify that layer boundaries are respected."""

    @pytest.mark.parametrize("layer,forbidden", list(LAYER_RULES.items()))
    def test_layer_does_not_import_forbidden(self, layer: str, forbidden: set[str]) -> None:
        """Each layer must not import from its forbidden layers."""
        layer_dir = PROJECT_ROOT / layer
        violations = []

        for filepath in get_python_files(layer_dir):
            imports = get_imports_from_file(filepath)
            bad_imports = imports & forbidden

            if bad_imports:
                violations.append(
                    f"{filepath.name} imports {bad_imports}"
                )

        assert not violations, (
            f"Layer '{layer}' has forbidden imports:\n" +
            "\n".join(f"  - {v}" for v in violations)
        )

    def test_formatters_are_pure(self) -> None:
        """
        Formatters must only import from stdlib and shared models.

        No HTTP client, no config, no MCP: they receive dataclasses and
        return markdown.
        """
        formatters_dir = PROJECT_ROOT / "formatters"
        allowed = {"formatters", "models"}
        stdlib_modules = getattr(sys, "stdlib_module_names", set())

        violations = []

        for filepath in get_python_files(formatters_dir):
            imports = get_imports_from_file(filepath)
            non_stdlib = imports - stdlib_modules - allowed

            if non_stdlib:
                violations.append(
                    f"{filepath.name} imports non-stdlib: {non_stdlib}"
                )

        assert not violations, (
            "Formatters must be pure (stdlib + models only):\n" +
            "\n".join(f"  - {v}" for v in violations)
        )

    def test_endpoints_make_no_calls(self) -> None:
        """Request builders only describe requests; the client sends them."""
        imports = get_imports_from_file(PROJECT_ROOT / "adapters" / "endpoints.py")
        assert "httpx" not in imports


class TestPackageStructure:
    """Verify expected package structure exists."""

    @pytest.mark.parametrize("package", ["formatters", "tools"])
    def test_package_has_init(self, package: str) -> None:
        """Each package with a public surface must have an __init__.py."""
        init_file = PROJECT_ROOT / package / "__init__.py"
        assert init_file.exists(), f"{package}/__init__.py missing"

    @pytest.mark.parametrize("tool_name", sorted(TOOL_NAMES))
    def test_each_tool_has_module(self, tool_name: str) -> None:
        """Every registered tool name has an implementation module."""
        module = PROJECT_ROOT / "tools" / f"{tool_name.replace('-', '_')}.py"
        assert module.exists(), f"tools/{module.name} missing for {tool_name}"
