from pathlib import Path

import pytest

from resmodel.utils import close_logging, reset_counts

from mocks import MockLeaf, MockNode, StringTable

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def _clean_logging():
    # Warning counts are module state, start every test from zero
    reset_counts()
    yield
    close_logging()
    reset_counts()


@pytest.fixture()
def golden_internal():
    """Compressed payload and the bytes it must decode to."""
    data = (FIXTURES_DIR / "golden_internal.bin").read_bytes()
    expected = b"ABCD" + b"xyz" * 3 + b"pq" * 161 + b"!"
    return data, expected


@pytest.fixture()
def tree():
    """root <- mid <- leaf, plus a sibling of mid. All buffers cached."""
    root = MockNode("root")
    mid = MockNode("mid", owner=root)
    sibling = MockNode("sibling", owner=root)
    leaf = MockLeaf(1, owner=mid)
    root.items.extend([mid, sibling])
    mid.items.append(leaf)
    for node in (root, mid, sibling):
        node.get_buffer()
    return root, mid, sibling, leaf


@pytest.fixture()
def table():
    return StringTable()
