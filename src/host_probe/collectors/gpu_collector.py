from __future__ import annotations

import logging
import os
import re
from typing import Callable

from host_probe.rules import (
    DISPLAY_CLASS_MARKERS,
    DRM_DRIVER_LABELS,
    EXCLUDED_DRM_DRIVERS,
    EXCLUDED_GPU_PATTERNS,
    NO_GPU,
    PRIORITY_GPU_VENDORS,
    RASPBERRY_PI_GPU_LABEL,
    TEGRA_CHIPS,
    VIDEOCORE_CHIPS,
    VIDEOCORE_DRIVERS,
)
from host_probe.sources import CommandRunner, HostFilesystem, SubprocessRunner

logger = logging.getLogger(__name__)

DRM_CARD_GLOB = "/sys/class/drm/card*"
DT_MODEL_PATH = "/sys/firmware/devicetree/base/model"

_RX_ADRENO = re.compile(r"adreno[-_](\d+)")
_RX_MALI = re.compile(r"mali[-_]([a-z]\d+)")
_RX_ALLWINNER = re.compile(r"sun\d+i-([a-z0-9]+)")


def is_excluded_gpu(name: str) -> bool:
    return any(rx.search(name) for rx in EXCLUDED_GPU_PATTERNS)


def is_display_line(line: str) -> bool:
    lower = line.lower()
    return any(marker in lower for marker in DISPLAY_CLASS_MARKERS)


def extract_pci_name(line: str) -> str:
    """Text after the last colon, minus a trailing ``(rev xx)``."""
    idx = line.rfind(":")
    if idx == -1 or idx == len(line) - 1:
        return ""
    name = line[idx + 1 :].strip()
    paren = name.rfind("(")
    if paren != -1:
        name = name[:paren].strip()
    return name


def pick_pci_gpu(output: str) -> str:
    lines = [line for line in output.splitlines() if is_display_line(line)]

    # Known vendors first; a plain VGA line must not beat a discrete card listed later.
    for line in lines:
        lower = line.lower()
        if not any(vendor in lower for vendor in PRIORITY_GPU_VENDORS):
            continue
        name = extract_pci_name(line)
        if name and not is_excluded_gpu(name):
            return name

    for line in lines:
        name = extract_pci_name(line)
        if name and not is_excluded_gpu(name):
            return name

    return NO_GPU


def decode_soc_model(driver: str, compatible: bytes | str) -> str:
    """Turn a device-tree ``compatible`` blob into a marketing name.

    Returns an empty string when nothing specific is recognised, in which
    case the caller falls back to the plain driver label.
    """
    if isinstance(compatible, bytes):
        compatible = compatible.decode("utf-8", errors="replace")
    lower = compatible.replace("\x00", " ").lower()

    if driver == "msm" or "adreno" in lower:
        m = _RX_ADRENO.search(lower)
        if m:
            return f"Qualcomm Adreno {m.group(1)}"
        return "Qualcomm Adreno"

    if driver in ("panfrost", "lima") or "mali" in lower:
        m = _RX_MALI.search(lower)
        if m:
            return f"ARM Mali {m.group(1).upper()}"
        return "ARM Mali"

    if driver in VIDEOCORE_DRIVERS:
        for chips, label in VIDEOCORE_CHIPS:
            if any(chip in lower for chip in chips):
                return label

    if "allwinner" in lower or "sun50i" in lower or "sun8i" in lower:
        m = _RX_ALLWINNER.search(lower)
        if m:
            return f"Allwinner {m.group(1).upper()}"
        return "Allwinner Display Engine"

    if driver == "tegra":
        for chip, label in TEGRA_CHIPS:
            if chip in lower:
                return label

    return ""


class GpuCollector:
    def __init__(self, runner: CommandRunner | None = None, fs: HostFilesystem | None = None) -> None:
        self.runner = runner or SubprocessRunner()
        self.fs = fs or HostFilesystem()

    def resolve_gpu_name(self) -> str:
        strategies: list[Callable[[], str]] = [self.from_lspci, self.from_sysfs_drm]
        for strategy in strategies:
            name = strategy()
            if name != NO_GPU:
                return name
        return NO_GPU

    def from_lspci(self) -> str:
        try:
            out = self.runner.run(["lspci"])
        except Exception as e:
            logger.debug("lspci failed: %s", e)
            return NO_GPU
        return pick_pci_gpu(out)

    def from_sysfs_drm(self) -> str:
        for card in self.fs.glob(DRM_CARD_GLOB):
            try:
                driver = os.path.basename(self.fs.readlink(f"{card}/device/driver"))
            except OSError:
                continue

            if driver in EXCLUDED_DRM_DRIVERS:
                continue

            try:
                compatible = self.fs.read_bytes(f"{card}/device/of_node/compatible")
            except OSError:
                compatible = None

            if compatible is not None:
                exact = decode_soc_model(driver, compatible)
                if exact:
                    return exact

            label = DRM_DRIVER_LABELS.get(driver)
            if label:
                return label
            if driver:
                return f"Direct Render Manager {driver}"

        try:
            model = self.fs.read_text(DT_MODEL_PATH)
        except OSError:
            return NO_GPU
        if "Raspberry Pi" in model:
            return RASPBERRY_PI_GPU_LABEL
        return NO_GPU
