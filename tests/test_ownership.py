import gc

import pytest

from resmodel.models import CacheableModel

from mocks import Holder, MockLeaf, MockNode


def test_owner_registers_child():
    parent = MockNode("parent")
    child = MockLeaf(owner=parent)

    assert child.owner is parent
    assert child in parent.children


def test_reassigning_owner_moves_child():
    first = MockNode("first")
    second = MockNode("second")
    child = MockLeaf(owner=first)

    child.owner = second

    assert child not in first.children
    assert child in second.children


def test_clearing_owner_detaches_child():
    parent = MockNode("parent")
    child = MockLeaf(owner=parent)

    child.owner = None
    assert child not in parent.children

    child.owner = parent
    del child.owner
    assert child.owner is None
    assert not parent.children


def test_setting_same_owner_is_noop():
    parent = MockNode("parent")
    parent.get_buffer()
    child = MockLeaf(owner=parent)

    child.owner = parent

    assert parent.children == frozenset({child})
    assert not parent.has_changed


def test_owner_change_does_not_uncache():
    first = MockNode("first")
    second = MockNode("second")
    child = MockLeaf(owner=first)
    first.get_buffer()
    second.get_buffer()

    child.owner = second

    assert not first.has_changed
    assert not second.has_changed


def test_owner_cycle_rejected():
    a = MockNode("a")
    b = MockNode("b", owner=a)
    c = MockNode("c", owner=b)

    with pytest.raises(ValueError):
        a.owner = c
    with pytest.raises(ValueError):
        a.owner = a
    assert a.owner is None


def test_non_model_owner_rejected():
    with pytest.raises(TypeError):
        MockLeaf(owner="not a model")


def test_children_are_weak():
    parent = MockNode("parent")
    MockLeaf(owner=parent)
    gc.collect()

    assert not parent.children


def test_symmetry_after_many_moves():
    owners = [MockNode(f"owner{i}") for i in range(3)]
    leaves = [MockLeaf(i) for i in range(6)]

    for step, leaf in enumerate(leaves * 3):
        leaf.owner = owners[step % 3] if step % 4 else None

    for leaf in leaves:
        for owner in owners:
            assert (leaf.owner is owner) == (leaf in owner.children)


def test_watched_change_propagates_to_every_ancestor(tree):
    root, mid, sibling, leaf = tree

    leaf.value = 2

    assert root.has_changed
    assert mid.has_changed
    assert not sibling.has_changed


def test_watched_same_value_keeps_cache(tree):
    root, mid, sibling, leaf = tree
    before = root.get_buffer()

    leaf.value = 1
    mid.name = "mid"

    assert root.get_buffer() is before
    assert root.serialize_count == 1


def test_first_assignment_does_not_uncache():
    parent = MockNode("parent")
    parent.get_buffer()

    MockNode("child", owner=parent)

    assert not parent.has_changed


def test_deleting_watched_attribute_uncaches(tree):
    root, mid, sibling, leaf = tree

    del leaf.value

    assert root.has_changed
    with pytest.raises(AttributeError):
        leaf.value


def test_uncache_is_idempotent(tree):
    root = tree[0]

    root.uncache()
    root.uncache()

    assert root.has_changed
    assert root.get_buffer() == b"root|mid|1|sibling"


def test_uncache_does_not_reach_children(tree):
    root, mid, sibling, leaf = tree

    root.uncache()

    assert not mid.has_changed
    assert not sibling.has_changed


def test_deep_uncache_reaches_descendants(tree):
    root, mid, sibling, leaf = tree

    root.deep_uncache()

    assert root.has_changed
    assert mid.has_changed
    assert sibling.has_changed


def test_watched_properties_declared_per_class():
    assert MockNode.watched_properties == frozenset({'name'})
    assert MockLeaf.watched_properties == frozenset({'value'})
    assert CacheableModel.watched_properties == frozenset()


def test_owned_watched_attribute_reparents():
    first = MockLeaf(1)
    second = MockLeaf(2)
    holder = Holder(first)
    holder.get_buffer()

    holder.part = second

    assert second.owner is holder
    assert first.owner is None
    assert holder.children == frozenset({second})
    assert holder.has_changed


def test_clone_and_equals_are_abstract():
    model = CacheableModel()

    with pytest.raises(NotImplementedError):
        model.clone()
    with pytest.raises(NotImplementedError):
        model.equals(model)
    model.validate()


def test_rejected_owned_value_leaves_attribute_untouched():
    outer = Holder()
    inner = Holder(owner=outer)
    leaf = MockLeaf(1)
    inner.part = leaf
    inner.get_buffer()

    with pytest.raises(ValueError):
        inner.part = outer

    assert inner.part is leaf
    assert leaf.owner is inner
    assert outer.owner is None
    assert not inner.has_changed
