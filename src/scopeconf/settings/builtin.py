"""Built-in setting descriptors.

Three tag types partition the built-ins: generic (DHCP-style) options that
any network scope may carry, per-interface hardware settings, and SMBIOS
firmware identity. The hardware and firmware settings are read-only.
"""

from .schema import SettingDescriptor, SettingType, dhcp_encap_opt, make_tag

# Tag types used by scopes and descriptors
TAG_TYPE_GENERIC = 0
TAG_TYPE_NETDEV = 1
TAG_TYPE_SMBIOS = 2

TAG_TYPE_NAMES = {
    "generic": TAG_TYPE_GENERIC,
    "netdev": TAG_TYPE_NETDEV,
    "smbios": TAG_TYPE_SMBIOS,
}

# Encapsulated option space for editor-specific options
ENCAP_OPT = 175


def scope_magic(tag_type: int) -> int:
    """Tag magic for a scope whose settings are of ``tag_type``."""
    return make_tag(0, tag_type)


SCRIPTLET_SETTING = SettingDescriptor(
    "scriptlet", "small boot script", make_tag(dhcp_encap_opt(ENCAP_OPT, 0x51))
)

BUILTIN_SETTINGS = [
    SettingDescriptor("ip", "IPv4 address", make_tag(50), SettingType.IPV4),
    SettingDescriptor("netmask", "IPv4 subnet mask", make_tag(1), SettingType.IPV4),
    SettingDescriptor("gateway", "Default gateway", make_tag(3), SettingType.IPV4),
    SettingDescriptor("dns", "DNS server", make_tag(6), SettingType.IPV4),
    SettingDescriptor("hostname", "Host name", make_tag(12)),
    SettingDescriptor("domain", "DNS domain", make_tag(15)),
    SettingDescriptor("root-path", "iSCSI root path", make_tag(17)),
    SettingDescriptor("filename", "Boot filename", make_tag(67)),
    SettingDescriptor("user-class", "User class identifier", make_tag(77)),
    SettingDescriptor("initiator-iqn", "iSCSI initiator name", make_tag(203)),
    SettingDescriptor(
        "priority",
        "Priority of these settings",
        make_tag(dhcp_encap_opt(ENCAP_OPT, 0x01)),
        SettingType.INT8,
    ),
    SettingDescriptor(
        "keep-san",
        "Preserve SAN connection",
        make_tag(dhcp_encap_opt(ENCAP_OPT, 0x08)),
        SettingType.INT8,
    ),
    SettingDescriptor("username", "User name", make_tag(dhcp_encap_opt(ENCAP_OPT, 0xBE))),
    SettingDescriptor("password", "Password", make_tag(dhcp_encap_opt(ENCAP_OPT, 0xBF))),
    SCRIPTLET_SETTING,
    SettingDescriptor(
        "mac",
        "MAC address",
        make_tag(1, TAG_TYPE_NETDEV, readonly=True),
        SettingType.HEX,
    ),
    SettingDescriptor(
        "uuid", "UUID", make_tag(1, TAG_TYPE_SMBIOS, readonly=True), SettingType.UUID
    ),
    SettingDescriptor("manufacturer", "Manufacturer", make_tag(2, TAG_TYPE_SMBIOS, readonly=True)),
    SettingDescriptor("product", "Product name", make_tag(3, TAG_TYPE_SMBIOS, readonly=True)),
    SettingDescriptor("serial", "Serial number", make_tag(4, TAG_TYPE_SMBIOS, readonly=True)),
    SettingDescriptor("asset", "Asset tag", make_tag(5, TAG_TYPE_SMBIOS, readonly=True)),
]
