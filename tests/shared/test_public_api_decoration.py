"""Static check that every public service method carries invocation logging."""

from __future__ import annotations

import ast
from pathlib import Path

_REPO_ROOT = Path(__file__).resolve().parents[2]
_SERVICE_ROOT = _REPO_ROOT / "services" / "state" / "document_authority"


def test_implementation_decorates_every_contract_method() -> None:
    contract = _public_methods(_SERVICE_ROOT / "service.py", "DocumentAuthorityService")
    decorated = _decorated_methods(
        _SERVICE_ROOT / "implementation.py", "DefaultDocumentAuthorityService"
    )

    assert contract, "service contract declares no public methods"
    missing = sorted(contract - decorated)
    assert not missing, f"Missing @public_api_logged on: {missing}"


def _class_node(file_path: Path, class_name: str) -> ast.ClassDef:
    module = ast.parse(file_path.read_text(encoding="utf-8"))
    for node in module.body:
        if isinstance(node, ast.ClassDef) and node.name == class_name:
            return node
    raise AssertionError(f"{class_name} not found in {file_path}")


def _public_methods(file_path: Path, class_name: str) -> set[str]:
    return {
        child.name
        for child in _class_node(file_path, class_name).body
        if isinstance(child, ast.FunctionDef) and not child.name.startswith("_")
    }


def _decorated_methods(file_path: Path, class_name: str) -> set[str]:
    names: set[str] = set()
    for child in _class_node(file_path, class_name).body:
        if not isinstance(child, ast.FunctionDef):
            continue
        for decorator in child.decorator_list:
            target = decorator.func if isinstance(decorator, ast.Call) else decorator
            if isinstance(target, ast.Name) and target.id == "public_api_logged":
                names.add(child.name)
    return names
