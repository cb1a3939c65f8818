#!/usr/bin/env python3
"""CI enforcement: fail on httpx imports outside the httpx transport module.

Scaffolds talk to the network only through the HttpTransport protocol.
"""

from __future__ import annotations

import ast
import sys
from pathlib import Path

ALLOWED_FILES = {Path("transport/httpx.py")}
SRC_DIR = Path(__file__).resolve().parent.parent / "src" / "ur_scaffold"


def check() -> list[str]:
    violations: list[str] = []
    for py_file in SRC_DIR.rglob("*.py"):
        rel = py_file.relative_to(SRC_DIR)
        if rel in ALLOWED_FILES:
            continue
        try:
            tree = ast.parse(py_file.read_text())
        except SyntaxError:
            continue
        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                for alias in node.names:
                    if alias.name == "httpx" or alias.name.startswith("httpx."):
                        violations.append(f"{rel}:{node.lineno}: import {alias.name}")
            elif isinstance(node, ast.ImportFrom):
                if node.level == 0 and node.module and node.module.split(".")[0] == "httpx":
                    violations.append(f"{rel}:{node.lineno}: from {node.module}")
    return violations


def main() -> None:
    violations = check()
    if violations:
        print("ERROR: httpx imports found outside transport/httpx.py:")
        for v in violations:
            print(f"  {v}")
        sys.exit(1)
    else:
        print("OK: no httpx imports outside transport/httpx.py")


if __name__ == "__main__":
    main()
