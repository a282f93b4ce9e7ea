"""Shared fixtures for the EPUB packaging tests."""

import sys
import zipfile
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import EpubConfig
from core.nodes import DocEntry, DocumentationNode, NodeType


@pytest.fixture
def sample_nodes():
    """One module, one exception and one protocol (ids A, B, C)."""
    return [
        DocumentationNode(
            id="A",
            type=NodeType.MODULE,
            moduledoc="Module `A` runs things.",
            docs=(
                DocEntry(id="run/2", name="run", arity=2, signature="run(x, y)", doc="Runs `x`."),
                DocEntry(id="valid?/1", name="valid?", arity=1, type="defmacro"),
            ),
        ),
        DocumentationNode(id="B", type=NodeType.EXCEPTION, moduledoc="Raised by `A.run/2`."),
        DocumentationNode(id="C", type=NodeType.PROTOCOL),
    ]


@pytest.fixture
def output_dir(tmp_path):
    """Staging/output directory inside the test's tmp dir."""
    return tmp_path / "doc"


@pytest.fixture
def make_config(output_dir):
    """Factory for EpubConfig writing into output_dir."""
    def _make(**overrides):
        values = {"project": "Demo", "version": "1.0.0", "output": str(output_dir)}
        values.update(overrides)
        return EpubConfig(**values)
    return _make


@pytest.fixture
def readme(tmp_path):
    """A markdown extra document."""
    path = tmp_path / "readme.md"
    path.write_text("# Demo\n\nCall `A.run/2` or see `A`.\n\nPlain paragraph.\n", encoding="utf-8")
    return path


def read_members(epub_path: Path) -> dict[str, bytes]:
    """Read all members of an archive into memory."""
    with zipfile.ZipFile(epub_path) as z:
        return {name: z.read(name) for name in z.namelist()}
