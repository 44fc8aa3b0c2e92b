import pytest

from resmodel.models import TrackedDict, TrackedList, track

from mocks import MockLeaf, MockNode


def _cached_node(items=None):
    node = MockNode("node", items)
    node.get_buffer()
    node.uncache_count = 0
    return node


def test_append_reparents_and_uncaches():
    node = _cached_node()
    leaf = MockLeaf(5)

    node.items.append(leaf)

    assert leaf.owner is node
    assert node.has_changed
    assert node.uncache_count == 1
    assert node.get_buffer() == b"node|5"


def test_index_assignment_reparents_new_value():
    old = MockLeaf(1)
    node = _cached_node([old])
    new = MockLeaf(2)

    node.items[0] = new

    assert new.owner is node
    assert node.items[0] is new
    assert node.uncache_count == 1


def test_removal_operations_uncache_each_time():
    node = _cached_node([1, 2, 3, 4])

    del node.items[0]
    node.items.pop()
    node.items.remove(2)

    assert list(node.items) == [3]
    assert node.uncache_count == 3


def test_bulk_operations_uncache_once():
    node = _cached_node([3, 1, 2])

    node.items.extend([5, 4])
    assert node.uncache_count == 1

    node.items.sort()
    assert node.uncache_count == 2
    assert node.items == [1, 2, 3, 4, 5]

    node.items.reverse()
    assert node.uncache_count == 3
    assert node.items == [5, 4, 3, 2, 1]

    node.items.clear()
    assert node.uncache_count == 4
    assert len(node.items) == 0


def test_iadd_keeps_tracked_list():
    node = _cached_node([1])
    items = node.items

    items += [2, 3]

    assert items is node.items
    assert node.items == [1, 2, 3]
    assert node.uncache_count == 1


def test_reads_do_not_uncache():
    node = _cached_node([1, 2, 3])

    assert node.items[1] == 2
    assert node.items[1:] == [2, 3]
    assert 3 in node.items
    assert list(reversed(node.items)) == [3, 2, 1]
    assert node.items.index(2) == 1
    assert node.uncache_count == 0


def test_hook_receives_change_details():
    calls = []
    node = MockNode("node")
    items = track([1, 2], lambda: node,
                  lambda owner, target, *rest: calls.append((owner, list(target), *rest)))

    items[1] = 9
    del items[0]

    assert calls[0] == (node, [1, 9], 1, 2, 9)
    assert calls[1] == (node, [9], 0, 1)


def test_underlying_errors_propagate():
    node = _cached_node()

    with pytest.raises(IndexError):
        node.items.pop()
    with pytest.raises(IndexError):
        node.items[3] = 1
    assert node.uncache_count == 0


def test_track_is_idempotent():
    node = MockNode("node")

    assert track(node.items, lambda: node) is node.items


def test_track_rejects_other_types():
    with pytest.raises(TypeError):
        track((1, 2), lambda: None)


def test_track_wraps_same_container():
    data = [1, 2]
    items = track(data, lambda: None)

    items.append(3)

    assert data == [1, 2, 3]
    assert isinstance(items.copy(), list)


def test_missing_owner_skips_invalidation():
    leaf = MockLeaf(1)
    items = track([], lambda: None)

    items.append(leaf)

    assert leaf.owner is None


def test_owner_resolved_at_mutation_time():
    first = _cached_node()
    second = _cached_node()
    current = [first]
    items = track([], lambda: current[0])

    items.append(1)
    current[0] = second
    items.append(2)

    assert first.uncache_count == 1
    assert second.uncache_count == 1


def test_dict_mutations_uncache_and_reparent():
    node = _cached_node()
    mapping = node._track_collection({'a': 1})
    leaf = MockLeaf(3)

    mapping['b'] = leaf
    assert leaf.owner is node

    del mapping['a']
    assert mapping.pop('b') is leaf
    assert mapping.setdefault('c', 4) == 4

    assert isinstance(mapping, TrackedDict)
    assert dict(mapping) == {'c': 4}
    assert node.uncache_count == 4


def test_dict_update_notifies_once():
    calls = []
    node = _cached_node()
    mapping = track({'a': 1}, lambda: node, lambda *args: calls.append(args))

    mapping.update({'a': 2, 'b': 3})

    assert node.uncache_count == 1
    assert calls == [(node, {'a': 2, 'b': 3}, None, {'a': 1, 'b': None}, {'a': 2, 'b': 3})]


def test_dict_missing_key_raises():
    node = _cached_node()
    mapping = node._track_collection({})

    with pytest.raises(KeyError):
        del mapping['missing']
    assert node.uncache_count == 0


def test_tracked_list_is_a_sequence():
    items = track([1, 2], lambda: None)

    assert isinstance(items, TrackedList)
    assert items == [1, 2]
    assert repr(items) == "TrackedList([1, 2])"


def test_dict_equal_value_is_not_a_change():
    calls = []
    node = _cached_node()
    mapping = track({'a': 1, 'b': 2}, lambda: node, lambda *args: calls.append(args))

    mapping['a'] = 1
    mapping.update({'a': 1, 'b': 2})
    assert node.uncache_count == 0
    assert calls == []

    mapping.update({'a': 1, 'b': 3})
    assert calls == [(node, {'a': 1, 'b': 3}, None, {'b': 2}, {'b': 3})]
    assert node.uncache_count == 1


def test_detached_collection_stops_notifying():
    calls = []
    node = _cached_node()
    mapping = track({'a': 1}, lambda: node, lambda *args: calls.append(args))

    mapping.detach()
    mapping['a'] = 2

    assert mapping['a'] == 2
    assert node.uncache_count == 0
    assert calls == []
