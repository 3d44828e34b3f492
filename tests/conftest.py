from pathlib import Path

import pytest


def make_tree(root: Path, files: dict) -> Path:
    """Create *files* ({relative path: text or bytes}) under *root*."""
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def proj(tmp_path):
    """The two-file project used throughout: a.txt and sub/b.txt."""
    root = tmp_path / "proj"
    root.mkdir()
    return make_tree(root, {"a.txt": "hello", "sub/b.txt": "world"})


@pytest.fixture
def out_file(tmp_path):
    out_dir = tmp_path / "out"
    out_dir.mkdir()
    return out_dir / "result.txt"
