"""Tests for YAML persistence of the scope tree."""

import tempfile
from pathlib import Path

import pytest
import yaml

from scopeconf.settings import (
    TAG_TYPE_NETDEV,
    YamlStorage,
    get_registry,
    parse_tag_name,
    scope_magic,
)


@pytest.fixture
def temp_dir():
    """Create a temporary directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


SAMPLE = """
root:
  type: generic
  values:
    hostname: bootbox
  children:
    - name: net0
      type: netdev
      values:
        mac: "52:54:00:12:34:56"
      children:
        - name: dhcp
          type: generic
          values:
            ip: 10.0.0.5
            175.3:hex: "0a:0b"
"""


class TestYamlStorage:
    """Tests for YamlStorage."""

    def test_load_sample(self, temp_dir):
        path = temp_dir / "settings.yaml"
        path.write_text(SAMPLE)

        store = YamlStorage(path).load()
        registry = get_registry()
        tree = store.tree

        assert store.fetch(tree.root, registry.find("hostname")) == "bootbox"
        net0 = tree.find("net0")
        assert net0.tag_type == TAG_TYPE_NETDEV
        assert store.fetch(net0, registry.find("mac")) == "52:54:00:12:34:56"

        dhcp = tree.find("net0.dhcp")
        assert store.fetch(dhcp, registry.find("ip")) == "10.0.0.5"
        assert store.fetch(dhcp, parse_tag_name("175.3:hex")) == "0a:0b"

    def test_missing_file_gives_empty_tree(self, temp_dir):
        store = YamlStorage(temp_dir / "none.yaml").load()
        assert len(store.tree) == 1
        assert store.items(store.tree.root) == []

    def test_malformed_yaml_gives_empty_tree(self, temp_dir):
        path = temp_dir / "bad.yaml"
        path.write_text("root: [unclosed")
        store = YamlStorage(path).load()
        assert len(store.tree) == 1

    def test_bad_values_are_skipped(self, temp_dir):
        path = temp_dir / "settings.yaml"
        path.write_text(
            "root:\n"
            "  values:\n"
            "    ip: not-an-address\n"
            "    no-such-setting: 1\n"
            "    hostname: ok\n"
        )
        store = YamlStorage(path).load()
        names = [d.name for d, _ in store.items(store.tree.root)]
        assert names == ["hostname"]

    @pytest.mark.parametrize("values", ["[a, b]", "plain", "42"])
    def test_values_that_are_not_a_mapping_are_ignored(self, temp_dir, values):
        path = temp_dir / "settings.yaml"
        path.write_text(
            "root:\n"
            f"  values: {values}\n"
            "  children:\n"
            "    - name: net0\n"
            "      values:\n"
            "        hostname: box\n"
        )
        store = YamlStorage(path).load()

        assert store.items(store.tree.root) == []
        net0 = store.tree.find("net0")
        assert store.fetch(net0, get_registry().find("hostname")) == "box"

    def test_children_that_are_not_a_list_are_ignored(self, temp_dir):
        path = temp_dir / "settings.yaml"
        path.write_text("root:\n  values:\n    hostname: box\n  children: 7\n")
        store = YamlStorage(path).load()

        assert len(store.tree) == 1
        assert store.fetch(store.tree.root, get_registry().find("hostname")) == "box"

    def test_unquoted_mac_is_skipped(self, temp_dir):
        path = temp_dir / "settings.yaml"
        path.write_text(
            "root:\n"
            "  children:\n"
            "    - name: net0\n"
            "      type: netdev\n"
            "      values:\n"
            "        mac: 52:54:00:12:34:56\n"
        )
        store = YamlStorage(path).load()

        net0 = store.tree.find("net0")
        assert store.fetch(net0, get_registry().find("mac")) is None

    def test_unquoted_number_for_integer_setting(self, temp_dir):
        path = temp_dir / "settings.yaml"
        path.write_text("root:\n  values:\n    190:uint16: 16\n    hostname: 123\n")
        store = YamlStorage(path).load()

        assert store.fetch(store.tree.root, parse_tag_name("190:uint16")) == "16"
        assert store.fetch(store.tree.root, get_registry().find("hostname")) is None

    def test_save_round_trip(self, temp_dir):
        path = temp_dir / "settings.yaml"
        path.write_text(SAMPLE)
        store = YamlStorage(path).load()

        out = temp_dir / "out.yaml"
        YamlStorage(out).save(store)
        reloaded = YamlStorage(out).load()

        dhcp = reloaded.tree.find("net0.dhcp")
        assert reloaded.fetch(dhcp, get_registry().find("ip")) == "10.0.0.5"
        assert [d.name for d in reloaded.extra_descriptors(dhcp)] == ["175.3:hex"]

    def test_save_layout(self, temp_dir):
        path = temp_dir / "settings.yaml"
        store = YamlStorage(path).load()
        store.tree.add("net0", scope_magic(TAG_TYPE_NETDEV))
        store.store(store.tree.root, get_registry().find("hostname"), "box")

        data = yaml.safe_load(path.read_text())
        assert data["root"]["values"] == {"hostname": "box"}
        assert data["root"]["children"] == [{"name": "net0", "type": "netdev"}]

    def test_auto_save_off(self, temp_dir):
        path = temp_dir / "settings.yaml"
        store = YamlStorage(path).load(auto_save=False)
        store.store(store.tree.root, get_registry().find("hostname"), "box")
        assert not path.exists()

        store.save()
        assert path.exists()
