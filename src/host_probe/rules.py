"""Exclusion and classification tables shared by the collectors.

Mountpoint and filesystem entries match on equality or prefix, so
``/etc/host`` also covers ``/etc/hosts`` and ``/etc/hostname``.
"""

from __future__ import annotations

import re

EXCLUDED_MOUNTPOINTS: tuple[str, ...] = (
    "/tmp",
    "/var/tmp",
    "/dev/shm",
    "/run",
    "/run/lock",
    "/run/user",
    "/var/lib/containers",
    "/var/lib/docker",
    "/proc",
    "/dev/pts",
    "/sys",
    "/sys/fs/cgroup",
    "/dev/mqueue",
    "/etc/resolv.conf",
    "/etc/host",
    "/dev/hugepages",
    "/nix/store",
)

EXCLUDED_FSTYPES: tuple[str, ...] = (
    "tmpfs",
    "devtmpfs",
    "nfs",
    "cifs",
    "smb",
    "vboxsf",
    "9p",
    "fuse",
    "overlay",
    "proc",
    "devpts",
    "sysfs",
    "cgroup",
    "mqueue",
    "hugetlbfs",
)

# Checked before EXCLUDED_FSTYPES, otherwise "fuse" would swallow it.
ALWAYS_PHYSICAL_FSTYPES: frozenset[str] = frozenset({"fuseblk"})

NETWORK_OPTION_MARKERS: tuple[str, ...] = ("remote", "network")

LOOP_DEVICE_PREFIX = "/dev/loop"

# Pool filesystems: "pool/dataset" devices collapse to "pool".
POOL_FSTYPES: frozenset[str] = frozenset({"zfs"})

DISPLAY_CLASS_MARKERS: tuple[str, ...] = ("vga", "3d", "display")

PRIORITY_GPU_VENDORS: tuple[str, ...] = (
    "nvidia",
    "amd",
    "radeon",
    "intel",
    "arc",
    "snap",
    "qualcomm",
    "snapdragon",
)

EXCLUDED_GPU_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^1111"),
    re.compile(r"^cirrus logic (cl[-\s]?)?gd 5", re.IGNORECASE),
    re.compile(r"virtio", re.IGNORECASE),
    re.compile(r"vmware", re.IGNORECASE),
    re.compile(r"qxl", re.IGNORECASE),
    re.compile(r"hyper-v", re.IGNORECASE),
)

EXCLUDED_DRM_DRIVERS: frozenset[str] = frozenset(
    {
        "virtio-pci",
        "virtio_gpu",
        "bochs-drm",
        "qxl",
        "vmwgfx",
        "cirrus",
        "vboxvideo",
        "hyperv_fb",
        "simpledrm",
        "simplefb",
        "cirrus-qemu",
    }
)

DRM_DRIVER_LABELS: dict[str, str] = {
    "vc4": "Broadcom VideoCore IV/VI (Raspberry Pi)",
    "vc4-drm": "Broadcom VideoCore IV/VI (Raspberry Pi)",
    "v3d": "Broadcom V3D (Raspberry Pi 4/5)",
    "v3d-drm": "Broadcom V3D (Raspberry Pi 4/5)",
    "msm": "Qualcomm Adreno (Unknown Model)",
    "msm_drm": "Qualcomm Adreno (Unknown Model)",
    "panfrost": "ARM Mali (Panfrost)",
    "lima": "ARM Mali (Lima)",
    "sun4i-drm": "Allwinner Display Engine",
    "sunxi-drm": "Allwinner Display Engine",
    "tegra": "NVIDIA Tegra",
    # LXC containers often see the host BMC adapter.
    "ast": "ASPEED Technology, Inc. ASPEED Graphics Family",
    "i915": "Intel Integrated Graphics",
    "i915-drm": "Intel Integrated Graphics",
    "mgag200": "Matrox G200 Series",
}

VIDEOCORE_DRIVERS: frozenset[str] = frozenset({"vc4", "vc4-drm", "v3d"})

# First match wins, newest chip first.
VIDEOCORE_CHIPS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("bcm2712",), "Broadcom VideoCore VII (Pi 5)"),
    (("bcm2711",), "Broadcom VideoCore VI (Pi 4)"),
    (("bcm2837", "bcm2835"), "Broadcom VideoCore IV"),
)

TEGRA_CHIPS: tuple[tuple[str, str], ...] = (
    ("tegra194", "NVIDIA Tegra Xavier"),
    ("tegra234", "NVIDIA Orin"),
    ("tegra210", "NVIDIA Tegra X1"),
)

RASPBERRY_PI_GPU_LABEL = "Broadcom VideoCore (Integrated)"

NO_GPU = "None"
