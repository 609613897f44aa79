"""Tests for architecture import boundaries.

These tests ensure that the layering is maintained:
- domain imports nothing from application, infrastructure or cli
- application imports nothing from infrastructure or cli
- nothing outside cli imports cli
"""

from __future__ import annotations

import ast
import re
from pathlib import Path

import pytest

# Root of the intelligent_migration package
PACKAGE_ROOT = Path(__file__).parent.parent.parent.parent / "intelligent_migration"


def get_python_files(directory: Path) -> list[Path]:
    return list(directory.rglob("*.py"))


def extract_imports_from_file(file_path: Path) -> list[str]:
    """Extract all imported module names from a Python file.

    Args:
        file_path: Path to Python file

    Returns:
        List of import strings (module names, relative ones without dots)
    """
    imports = []
    tree = ast.parse(file_path.read_text(encoding="utf-8"))
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                imports.append(alias.name)
        elif isinstance(node, ast.ImportFrom):
            if node.module:
                imports.append(node.module)
    return imports


def has_forbidden_import(imports: list[str], forbidden_pattern: str) -> list[str]:
    pattern = re.compile(forbidden_pattern)
    return [imp for imp in imports if pattern.search(imp)]


def find_violations(layer: str, forbidden_pattern: str) -> list[str]:
    layer_dir = PACKAGE_ROOT / layer
    if not layer_dir.exists():
        pytest.skip(f"{layer} directory not found")

    violations = []
    for py_file in get_python_files(layer_dir):
        forbidden = has_forbidden_import(
            extract_imports_from_file(py_file), forbidden_pattern
        )
        if forbidden:
            rel_path = py_file.relative_to(PACKAGE_ROOT.parent)
            violations.append(f"{rel_path}: {forbidden}")
    return violations


class TestLayerBoundaries:
    """Tests ensuring inner layers never reach outwards."""

    def test_package_root_exists(self):
        assert (PACKAGE_ROOT / "__init__.py").exists()

    def test_domain_is_self_contained(self):
        """Domain layer must not import application, infrastructure or CLI."""
        violations = find_violations(
            "domain", r"(^|\.)(application|infrastructure|cli)(\.|$)"
        )
        assert not violations, "Domain layer imports outer layers:\n" + "\n".join(
            violations
        )

    def test_application_does_not_import_adapters(self):
        """Application layer must not import infrastructure or CLI."""
        violations = find_violations("application", r"(^|\.)(infrastructure|cli)(\.|$)")
        assert not violations, (
            "Application layer imports outer layers:\n" + "\n".join(violations)
        )

    def test_infrastructure_does_not_import_cli(self):
        """Infrastructure layer must not import from CLI."""
        violations = find_violations("infrastructure", r"(^|\.)cli(\.|$)")
        assert not violations, (
            "Infrastructure layer imports CLI modules:\n" + "\n".join(violations)
        )
