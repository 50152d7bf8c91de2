import pytest

from jcontainers.objects import NULL_HANDLE, CollectionType, ObjectBase
from jcontainers.registry import ObjectRegistry


class Box(ObjectBase):
    def __init__(self, collection_type=CollectionType.ARRAY):
        super().__init__(collection_type)
        self.items = []

    def clear(self):
        self.items.clear()

    def count(self):
        return len(self.items)

    def nullify_objects(self):
        self.items = []

    def visit_referenced_objects(self, visitor):
        for item in self.items:
            visitor(item)


class RecordingQueue:
    def __init__(self):
        self.prolonged = []
        self.not_prolonged = []

    def prolong_lifetime(self, obj, is_public):
        self.prolonged.append((obj, is_public))

    def not_prolong_lifetime(self, obj):
        self.not_prolonged.append(obj)


class Context:
    def __init__(self, registry):
        self.registry = registry
        self.aqueue = RecordingQueue()


def make(ctx):
    obj = Box()
    obj.set_context(ctx)
    obj.register_self()
    return obj


def test_type_is_kept():
    obj = Box(CollectionType(2))
    assert obj.type is CollectionType.MAP
    assert int(obj.type) == 2


def test_public_id_registers_without_prolonging():
    ctx = Context(ObjectRegistry())
    obj = make(ctx)
    assert not obj.is_public()
    handle = obj.public_id()
    assert handle != NULL_HANDLE
    assert obj.public_id() == handle
    assert ctx.registry.get_object(handle) is obj
    assert ctx.aqueue.prolonged == []


def test_uid_prolongs_unowned_object():
    ctx = Context(ObjectRegistry())
    obj = make(ctx)
    handle = obj.uid()
    assert obj.handle == handle
    assert ctx.aqueue.prolonged == [(obj, True)]
    assert obj.uid() == handle
    assert len(ctx.aqueue.prolonged) == 1


def test_uid_does_not_prolong_owned_object():
    ctx = Context(ObjectRegistry())
    obj = make(ctx)
    obj.retain()
    obj.uid()
    assert ctx.aqueue.prolonged == []


def test_release_to_zero_prolongs():
    ctx = Context(ObjectRegistry())
    obj = make(ctx)
    assert obj.retain() is obj
    assert obj.ref_count() == 1
    obj.release()
    assert obj.ref_count() == 0
    assert obj.no_owners()
    assert ctx.aqueue.prolonged == [(obj, False)]


def test_release_at_zero_is_ignored():
    ctx = Context(ObjectRegistry())
    obj = make(ctx)
    obj.release()
    assert obj.ref_count() == 0
    assert ctx.aqueue.prolonged == []


def test_release_without_context_is_safe():
    obj = Box(CollectionType(1))
    obj.retain()
    obj.release()
    assert obj.no_owners()
    assert obj.ref_count() == 0


def test_tes_retain_and_release():
    ctx = Context(ObjectRegistry())
    obj = make(ctx)
    obj.tes_retain()
    assert obj.is_user_retained()
    assert ctx.aqueue.not_prolonged == [obj]
    obj.tes_release()
    assert not obj.is_user_retained()
    assert ctx.aqueue.prolonged == [(obj, True)]


def test_stack_release_prolongs():
    ctx = Context(ObjectRegistry())
    obj = make(ctx)
    obj.stack_retain()
    assert not obj.no_owners()
    obj.stack_release()
    assert ctx.aqueue.prolonged == [(obj, False)]


def test_aqueue_release_deletes_sole_owned():
    ctx = Context(ObjectRegistry())
    obj = make(ctx)
    obj.uid()
    obj.aqueue_retain()
    assert obj.is_in_aqueue()
    assert obj.aqueue_release() is True
    assert obj.deleted
    assert ctx.registry.object_count() == 0
    assert ctx.registry.public_object_count() == 0


def test_aqueue_release_keeps_owned():
    ctx = Context(ObjectRegistry())
    obj = make(ctx)
    obj.retain()
    obj.aqueue_retain()
    assert obj.aqueue_release() is False
    assert not obj.is_in_aqueue()
    assert not obj.deleted
    assert obj.ref_count() == 1


def test_zero_lifetime_notifies_queue():
    ctx = Context(ObjectRegistry())
    obj = make(ctx)
    assert obj.zero_lifetime() is obj
    assert ctx.aqueue.not_prolonged == [obj]


def test_context_rules():
    ctx = Context(ObjectRegistry())
    obj = Box()
    with pytest.raises(RuntimeError):
        obj.public_id()
    obj.set_context(ctx)
    with pytest.raises(RuntimeError):
        obj.set_context(ctx)


def test_tags_compare_without_case():
    ctx = Context(ObjectRegistry())
    obj = make(ctx)
    obj.set_tag("Quest")
    assert obj.has_equal_tag("QUEST")
    assert not obj.has_equal_tag("other")
    assert not obj.has_equal_tag(None)
    obj.set_tag(None)
    assert obj.has_equal_tag("")


def test_visit_referenced_objects():
    ctx = Context(ObjectRegistry())
    parent = make(ctx)
    child = make(ctx)
    parent.items.append(child.retain())
    seen = []
    parent.visit_referenced_objects(seen.append)
    assert seen == [child]
    assert parent.count() == 1
    parent.clear()
    assert parent.count() == 0