"""Wrappers for the supported external scanners."""

from .openscap import OpenScapScanner
from .yara_scanner import YaraScanner

__all__ = ["OpenScapScanner", "YaraScanner"]
