#!/usr/bin/env python3
"""Check hexagonal architecture import boundaries of the triage package.

This script enforces the layering rules:
- domain/: Records, snapshots, outcomes, errors. NO imports from other layers
- application/: Ports and the review queue service, may import from domain/
  (plus infrastructure/observability for logging context)
- config/: Configuration, may import from domain/ and application/
- infrastructure/: Adapters and stubs, may import from domain/ and application/
- bootstrap/: Composition root, may import from every inner layer
- api/: HTTP interface, may import from application/, domain/, config/ and
  bootstrap/ (plus infrastructure/observability for request correlation)

Usage:
    python scripts/check_imports.py [package_directory]

Exit codes:
    0: No violations found
    1: Violations found
"""
import ast
import sys
from pathlib import Path

PACKAGE_NAME = "triage"

# Explicit import rules: what each layer CAN import from
ALLOWED_IMPORTS: dict[str, set[str]] = {
    "domain": set(),
    "application": {"domain"},
    "config": {"domain", "application"},
    "infrastructure": {"domain", "application"},
    "bootstrap": {"domain", "application", "config", "infrastructure"},
    "api": {"domain", "application", "config", "bootstrap"},
}

# Cross-cutting sub-packages reachable from layers that may not import
# the rest of their parent layer
ALLOWED_SUBPACKAGES: dict[str, set[str]] = {
    "application": {"infrastructure.observability"},
    "api": {"infrastructure.observability"},
}


def get_import_module(node: ast.Import | ast.ImportFrom) -> str | None:
    """Extract the module name from an import statement."""
    if isinstance(node, ast.ImportFrom):
        # Relative imports stay inside their own package
        if node.level:
            return None
        return node.module
    if isinstance(node, ast.Import) and node.names:
        return node.names[0].name
    return None


def _get_file_layer(py_file: Path, package_dir: Path) -> str | None:
    """Determine the architectural layer of a file.

    Args:
        py_file: Path to the Python file
        package_dir: Path to the triage package directory

    Returns:
        The layer name or None for files outside any layer
    """
    try:
        relative = py_file.relative_to(package_dir)
    except ValueError:
        return None

    parts = relative.parts
    if len(parts) < 2:
        return None

    file_layer = parts[0]
    return file_layer if file_layer in ALLOWED_IMPORTS else None


def _parse_file(py_file: Path) -> ast.Module | None:
    """Parse a Python file into an AST, or None if it cannot be parsed."""
    try:
        source = py_file.read_text(encoding="utf-8")
        return ast.parse(source, filename=str(py_file))
    except (SyntaxError, UnicodeDecodeError) as e:
        print(f"Warning: Could not parse {py_file}: {e}", file=sys.stderr)
        return None


def _check_import_violation(module: str, file_layer: str) -> str | None:
    """Check if an import violates layer boundaries.

    Args:
        module: The import module string (e.g., "triage.domain.models")
        file_layer: The layer the importing file belongs to

    Returns:
        Error message if violation detected, None otherwise
    """
    if not module.startswith(f"{PACKAGE_NAME}."):
        return None

    module_parts = module.split(".")
    target_layer = module_parts[1]
    if target_layer not in ALLOWED_IMPORTS:
        return None

    # Same-layer imports are always allowed
    if target_layer == file_layer:
        return None

    if target_layer in ALLOWED_IMPORTS[file_layer]:
        return None

    target_path = ".".join(module_parts[1:])
    for subpackage in ALLOWED_SUBPACKAGES.get(file_layer, set()):
        if target_path == subpackage or target_path.startswith(f"{subpackage}."):
            return None

    return f"{file_layer} layer cannot import from {target_layer}"


def check_file_imports(py_file: Path, package_dir: Path) -> list[tuple[str, int, str]]:
    """Check a single file for import boundary violations.

    Args:
        py_file: Path to the Python file to check
        package_dir: Path to the triage package directory

    Returns:
        List of (file_path, line_number, violation_message) tuples
    """
    file_layer = _get_file_layer(py_file, package_dir)
    if file_layer is None:
        return []

    tree = _parse_file(py_file)
    if tree is None:
        return []

    violations: list[tuple[str, int, str]] = []
    for node in ast.walk(tree):
        if isinstance(node, (ast.Import, ast.ImportFrom)):
            module = get_import_module(node)
            if module:
                error_msg = _check_import_violation(module, file_layer)
                if error_msg:
                    violations.append((str(py_file), node.lineno, error_msg))

    return violations


def check_import_boundaries(package_dir: Path) -> list[tuple[str, int, str]]:
    """Check all Python files in the package for import boundary violations.

    Args:
        package_dir: Path to the triage package directory

    Returns:
        List of (file_path, line_number, violation_message) tuples
    """
    violations: list[tuple[str, int, str]] = []

    if not package_dir.exists():
        print(f"Error: Package directory '{package_dir}' does not exist", file=sys.stderr)
        return violations

    for py_file in package_dir.rglob("*.py"):
        violations.extend(check_file_imports(py_file, package_dir))

    return violations


def format_violations(violations: list[tuple[str, int, str]]) -> str:
    """Format violations for human-readable output."""
    if not violations:
        return ""

    lines = ["Import boundary violations found:", ""]
    for file_path, line_no, message in sorted(violations):
        lines.append(f"  {file_path}:{line_no}: {message}")
    lines.append("")
    lines.append(f"Total: {len(violations)} violation(s)")
    return "\n".join(lines)


def main() -> int:
    """Main entry point.

    Returns:
        0 if no violations, 1 if violations found
    """
    if len(sys.argv) > 1:
        package_dir = Path(sys.argv[1])
    else:
        project_root = Path(__file__).parent.parent
        package_dir = project_root / PACKAGE_NAME

    violations = check_import_boundaries(package_dir)

    if violations:
        print(format_violations(violations))
        return 1
    print("No import boundary violations found.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
