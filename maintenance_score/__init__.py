"""
Cargo Maintenance Score

Detect unmaintained and risky Rust dependencies by scoring crates.io
publish recency and download volume.
"""

__version__ = "0.1.0"

from .cli import main

__all__ = ["main"]
