"""Tests for the scope tree."""

import pytest

from scopeconf.errors import UnknownScopeError
from scopeconf.settings import TAG_TYPE_NETDEV, ScopeTree, scope_magic


class TestScopeTree:
    """Tests for ScopeTree."""

    def test_root_is_unnamed(self):
        tree = ScopeTree()
        assert tree.root.name == ""
        assert tree.root.is_root
        assert tree.parent_of(tree.root) is None

    def test_parent_is_a_handle(self, net_tree):
        net0 = net_tree.find("net0")
        dhcp = net_tree.find("net0.dhcp")
        assert dhcp.parent == net0.handle
        assert net_tree.parent_of(dhcp) is net0
        assert net_tree.get(net0.handle) is net0

    def test_full_name(self, net_tree):
        assert net_tree.full_name(net_tree.find("net0.dhcp")) == "net0.dhcp"
        assert net_tree.full_name(net_tree.root) == ""

    def test_find_root(self, net_tree):
        assert net_tree.find("") is net_tree.root

    def test_find_unknown_lists_available(self, net_tree):
        with pytest.raises(UnknownScopeError) as exc_info:
            net_tree.find("net1")
        assert "net0" in str(exc_info.value)
        assert exc_info.value.path == "net1"

    def test_children_keep_insertion_order(self):
        tree = ScopeTree()
        for name in ("b", "a", "c"):
            tree.add(name, scope_magic(TAG_TYPE_NETDEV))
        assert [c.name for c in tree.root.children] == ["b", "a", "c"]

    def test_tag_type_from_magic(self, net_tree):
        assert net_tree.find("net0").tag_type == TAG_TYPE_NETDEV

    @pytest.mark.parametrize("name", ["", "a.b", "a/b"])
    def test_invalid_names(self, name):
        with pytest.raises(ValueError):
            ScopeTree().add(name, 0)

    def test_duplicate_sibling(self, net_tree):
        with pytest.raises(ValueError, match="already exists"):
            net_tree.add("net0", 0)

    def test_walk_is_preorder(self, net_tree):
        assert [net_tree.full_name(s) for s in net_tree.walk()] == ["", "net0", "net0.dhcp"]
        assert len(net_tree) == 3
