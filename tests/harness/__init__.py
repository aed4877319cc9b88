"""Test harness for ml-results.

Re-exports all public API for convenient imports:
    from tests.harness import run_app, make_multipart, press_and_settle, ...
"""

from tests.harness.app_runner import run_app
from tests.harness.builders import make_multipart, make_part, make_xml_parts
from tests.harness.interactions import press_and_settle, press_sequence

__all__ = [
    "run_app",
    "make_multipart",
    "make_part",
    "make_xml_parts",
    "press_and_settle",
    "press_sequence",
]
