"""Layer boundary tests.

Allowed direction:
  session -> logic
  session -> shared
Forbidden (runtime imports):
  logic -> session, logic -> shared
"""

import ast
from pathlib import Path

_PACKAGE_ROOT = Path(__file__).resolve().parents[2]


def _runtime_imports(source_dir: Path) -> list[tuple[str, int, str]]:
    """Return (filename, lineno, module) for imports outside `if TYPE_CHECKING:` blocks."""
    results: list[tuple[str, int, str]] = []
    for py_file in source_dir.rglob("*.py"):
        tree = ast.parse(py_file.read_text(), filename=str(py_file))
        type_checking = _type_checking_ranges(tree)
        for node in ast.walk(tree):
            if not isinstance(node, (ast.Import, ast.ImportFrom)):
                continue
            if any(start <= node.lineno <= end for start, end in type_checking):
                continue
            if isinstance(node, ast.Import):
                results.extend((py_file.name, node.lineno, alias.name) for alias in node.names)
            elif node.module is not None:
                results.append((py_file.name, node.lineno, node.module))
    return results


def _type_checking_ranges(tree: ast.Module) -> list[tuple[int, int]]:
    ranges: list[tuple[int, int]] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.If) and isinstance(node.test, ast.Name) and node.test.id == "TYPE_CHECKING":
            end = max(child.lineno for child in ast.walk(node) if hasattr(child, "lineno"))
            ranges.append((node.lineno, end))
    return ranges


def test_logic_is_self_contained():
    """pinoy_mahjong.logic must not depend on the session or shared layers."""
    violations = [
        f"{name}:{lineno} {module}"
        for name, lineno, module in _runtime_imports(_PACKAGE_ROOT / "logic")
        if module.startswith(("pinoy_mahjong.session", "pinoy_mahjong.shared"))
    ]
    assert violations == [], f"pinoy_mahjong.logic imports outer layers: {violations}"


def test_shared_does_not_import_session():
    violations = [
        f"{name}:{lineno} {module}"
        for name, lineno, module in _runtime_imports(_PACKAGE_ROOT / "shared")
        if module.startswith("pinoy_mahjong.session")
    ]
    assert violations == [], f"pinoy_mahjong.shared imports the session layer: {violations}"
