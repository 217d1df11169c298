#!/usr/bin/env python3
"""Check that src/ packages only import from the layers they may depend on.

Layer rules:
- domain: nothing else in src
- config: nothing else in src
- application: domain, config
- infrastructure: domain, application, config
- api: domain, application, config, bootstrap
- bootstrap: anything (composition root)

Usage:
    python scripts/check_layers.py [src_directory]

Exit codes:
    0: No violations found
    1: Violations found
"""

from __future__ import annotations

import ast
import sys
from pathlib import Path

ALLOWED_IMPORTS: dict[str, frozenset[str]] = {
    "domain": frozenset(),
    "config": frozenset(),
    "application": frozenset({"domain", "config"}),
    "infrastructure": frozenset({"domain", "application", "config"}),
    "api": frozenset({"domain", "application", "config", "bootstrap"}),
}

Violation = tuple[str, int, str]


def imported_modules(tree: ast.AST) -> list[tuple[str, int]]:
    """Return (module, line) for every absolute import in ``tree``."""
    found: list[tuple[str, int]] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.ImportFrom) and node.module and node.level == 0:
            found.append((node.module, node.lineno))
        elif isinstance(node, ast.Import):
            found.extend((alias.name, node.lineno) for alias in node.names)
    return found


def layer_of(py_file: Path, src_dir: Path) -> str | None:
    """Return the top-level src package a file belongs to, if it is ruled."""
    try:
        parts = py_file.relative_to(src_dir).parts
    except ValueError:
        return None
    if len(parts) < 2:
        return None
    return parts[0] if parts[0] in ALLOWED_IMPORTS else None


def check_file(py_file: Path, src_dir: Path) -> list[Violation]:
    """Check one file against its layer's rule."""
    layer = layer_of(py_file, src_dir)
    if layer is None:
        return []
    try:
        tree = ast.parse(py_file.read_text(encoding="utf-8"), filename=str(py_file))
    except SyntaxError as exc:
        return [(str(py_file), exc.lineno or 0, f"syntax error: {exc.msg}")]

    violations: list[Violation] = []
    for module, lineno in imported_modules(tree):
        parts = module.split(".")
        if parts[0] != "src" or len(parts) < 2:
            continue
        target = parts[1]
        if target == layer or target == "__init__":
            continue
        if target not in ALLOWED_IMPORTS[layer]:
            violations.append(
                (str(py_file), lineno, f"{layer} must not import from {target}")
            )
    return violations


def check_tree(src_dir: Path) -> list[Violation]:
    """Check every Python file under ``src_dir``."""
    violations: list[Violation] = []
    for py_file in sorted(src_dir.rglob("*.py")):
        violations.extend(check_file(py_file, src_dir))
    return violations


def main(argv: list[str]) -> int:
    src_dir = Path(argv[1]) if len(argv) > 1 else Path(__file__).parent.parent / "src"
    if not src_dir.is_dir():
        print(f"ERROR: {src_dir} is not a directory", file=sys.stderr)
        return 1

    violations = check_tree(src_dir)
    for path, lineno, message in violations:
        print(f"{path}:{lineno}: {message}")
    if violations:
        print(f"\n{len(violations)} layer violation(s)")
        return 1
    print("No layer violations found.")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
