"""Packaging regression tests."""

import re
from pathlib import Path
from typing import Set


def _read_setuptools_packages() -> Set[str]:
    pyproject = Path(__file__).with_name("pyproject.toml").read_text(encoding="utf-8")
    match = re.search(r"^packages\s*=\s*\[(.*?)\]", pyproject, flags=re.DOTALL | re.MULTILINE)
    assert match is not None, "packages is missing from pyproject.toml"
    return set(re.findall(r'"([^"]+)"', match.group(1)))


def test_connectordraw_package_is_declared():
    packages = _read_setuptools_packages()
    assert "connectordraw" in packages


def test_every_module_is_inside_the_package():
    package_dir = Path(__file__).with_name("connectordraw")
    modules = {path.stem for path in package_dir.glob("*.py")}
    required = {"anchors", "elbow", "sampling", "labels", "alignment", "resolver", "dragging", "model"}
    missing = required - modules
    assert not missing, f"Missing modules in connectordraw: {sorted(missing)}"
