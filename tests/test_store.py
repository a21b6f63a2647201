"""Tests for SettingsStore."""

from conftest import HOSTNAME, IP, MAC

from scopeconf.settings import MAX_VALUE_LEN, Lookup, parse_tag_name


class TestFetchAndStore:
    """Tests for typed store and fetch."""

    def test_store_then_fetch(self, net_store, net_tree):
        assert net_store.store(net_tree.root, IP, "10.0.0.5") is None
        assert net_store.fetch(net_tree.root, IP) == "10.0.0.5"

    def test_values_are_normalised(self, net_store, net_tree):
        net_store.store(net_tree.root, IP, " 10.0.0.5 ")
        assert net_store.fetch(net_tree.root, IP) == "10.0.0.5"

        priority = parse_tag_name("175.1:uint16")
        net_store.store(net_tree.root, priority, "0x10")
        assert net_store.fetch(net_tree.root, priority) == "16"

    def test_missing_value(self, net_store, net_tree):
        assert net_store.fetch(net_tree.root, HOSTNAME) is None
        assert not net_store.exists(net_tree.root, HOSTNAME)

    def test_rejected_store_changes_nothing(self, net_store, net_tree):
        net_store.store(net_tree.root, IP, "10.0.0.5")
        reason = net_store.store(net_tree.root, IP, "abc")
        assert reason == "invalid IPv4 address 'abc'"
        assert net_store.fetch(net_tree.root, IP) == "10.0.0.5"

    def test_empty_text_deletes(self, net_store, net_tree):
        net_store.store(net_tree.root, HOSTNAME, "box")
        assert net_store.store(net_tree.root, HOSTNAME, "") is None
        assert net_store.fetch(net_tree.root, HOSTNAME) is None

    def test_too_long_rejected(self, net_store, net_tree):
        reason = net_store.store(net_tree.root, HOSTNAME, "x" * MAX_VALUE_LEN)
        assert "too long" in reason
        assert net_store.store(net_tree.root, HOSTNAME, "x" * (MAX_VALUE_LEN - 1)) is None

    def test_read_only_not_enforced_by_store(self, net_store, net_tree):
        net0 = net_tree.find("net0")
        assert net_store.store(net0, MAC, "52:54:00:12:34:56") is None
        assert net_store.fetch(net0, MAC) == "52:54:00:12:34:56"

    def test_delete(self, net_store, net_tree):
        net_store.store(net_tree.root, HOSTNAME, "box")
        net_store.delete(net_tree.root, HOSTNAME)
        assert net_store.fetch(net_tree.root, HOSTNAME) is None
        # Deleting again is a no-op
        net_store.delete(net_tree.root, HOSTNAME)


class TestInheritedLookup:
    """Tests for fetch_effective."""

    def test_inherit_finds_descendant_value(self, net_store, net_tree):
        dhcp = net_tree.find("net0.dhcp")
        net_store.store(dhcp, HOSTNAME, "from-dhcp")

        assert net_store.fetch_effective(net_tree.root, HOSTNAME) == "from-dhcp"
        assert net_store.fetch_effective(net_tree.root, HOSTNAME, Lookup.LOCAL) is None
        assert net_store.exists(net_tree.root, HOSTNAME, Lookup.INHERIT)
        assert not net_store.exists(net_tree.root, HOSTNAME)

    def test_local_value_wins(self, net_store, net_tree):
        net_store.store(net_tree.find("net0.dhcp"), HOSTNAME, "child")
        net_store.store(net_tree.root, HOSTNAME, "root")
        assert net_store.fetch_effective(net_tree.root, HOSTNAME) == "root"

    def test_values_do_not_flow_downwards(self, net_store, net_tree):
        net_store.store(net_tree.root, HOSTNAME, "root")
        assert net_store.fetch_effective(net_tree.find("net0.dhcp"), HOSTNAME) is None


class TestAdHocSettings:
    """Tests for values stored under unregistered tags."""

    def test_extra_descriptors_in_insertion_order(self, net_store, net_tree):
        first = parse_tag_name("175.3:hex")
        second = parse_tag_name("200")
        net_store.store(net_tree.root, second, "x")
        net_store.store(net_tree.root, HOSTNAME, "box")
        net_store.store(net_tree.root, first, "0a")

        names = [d.name for d in net_store.extra_descriptors(net_tree.root)]
        assert names == ["200:string", "175.3:hex"]

    def test_named_syntax_for_registered_tag_uses_registry_descriptor(self, net_store, net_tree):
        net_store.store(net_tree.root, parse_tag_name("12"), "box")
        assert net_store.extra_descriptors(net_tree.root) == []
        assert net_store.items(net_tree.root) == [(HOSTNAME, "box")]


class TestListeners:
    """Tests for change notification."""

    def test_listener_called_on_store_and_delete(self, net_store, net_tree):
        events = []
        net_store.on_change(lambda scope, descriptor, value: events.append((descriptor.name, value)))

        net_store.store(net_tree.root, HOSTNAME, "box")
        net_store.delete(net_tree.root, HOSTNAME)

        assert events == [("hostname", "box"), ("hostname", None)]

    def test_rejected_store_does_not_notify(self, net_store, net_tree):
        events = []
        net_store.on_change(lambda *args: events.append(args))
        net_store.store(net_tree.root, IP, "bogus")
        assert events == []

    def test_remove_listener(self, net_store, net_tree):
        events = []

        def listener(*args):
            events.append(args)

        net_store.on_change(listener)
        net_store.remove_listener(listener)
        net_store.store(net_tree.root, HOSTNAME, "box")
        assert events == []

    def test_failing_listener_does_not_break_store(self, net_store, net_tree):
        def broken(*args):
            raise RuntimeError("boom")

        net_store.on_change(broken)
        assert net_store.store(net_tree.root, HOSTNAME, "box") is None
        assert net_store.fetch(net_tree.root, HOSTNAME) == "box"


class TestSaveFailure:
    """Tests for auto-save failing underneath a change."""

    def test_failed_save_keeps_previous_value(self, net_store, net_tree, unwritable_storage):
        net_store.store(net_tree.root, HOSTNAME, "box")
        net_store.attach_storage(unwritable_storage)

        reason = net_store.store(net_tree.root, HOSTNAME, "other")

        assert reason.startswith("cannot save: ")
        assert net_store.fetch(net_tree.root, HOSTNAME) == "box"

    def test_failed_save_of_new_value_leaves_scope_empty(
        self, net_store, net_tree, unwritable_storage
    ):
        net_store.attach_storage(unwritable_storage)

        assert net_store.store(net_tree.root, HOSTNAME, "box") is not None
        assert net_store.items(net_tree.root) == []

    def test_failed_delete_keeps_value_and_order(self, net_store, net_tree, unwritable_storage):
        first = parse_tag_name("175.3:hex")
        second = parse_tag_name("200")
        net_store.store(net_tree.root, first, "0a")
        net_store.store(net_tree.root, second, "x")
        net_store.attach_storage(unwritable_storage)

        assert net_store.delete(net_tree.root, first).startswith("cannot save: ")
        assert net_store.fetch(net_tree.root, first) == "0a"
        assert net_store.extra_descriptors(net_tree.root) == [first, second]

    def test_failed_save_does_not_notify(self, net_store, net_tree, unwritable_storage):
        events = []
        net_store.on_change(lambda *args: events.append(args))
        net_store.attach_storage(unwritable_storage)

        net_store.store(net_tree.root, HOSTNAME, "box")
        assert events == []

    def test_auto_save_off_defers_failure(self, net_store, net_tree, unwritable_storage):
        net_store.attach_storage(unwritable_storage, auto_save=False)
        assert net_store.store(net_tree.root, HOSTNAME, "box") is None
        assert net_store.fetch(net_tree.root, HOSTNAME) == "box"
