"""Global pytest configuration and fixtures.

Provides the RFC marker used to trace tests back to RFC 7512 sections.
"""

from __future__ import annotations


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "rfc(section): mark test with the RFC 7512 section it exercises"
    )


def pytest_collection_modifyitems(items):
    """Extract RFC markers into user_properties for conformance reporting."""
    for item in items:
        for marker in item.iter_markers(name="rfc"):
            if marker.args:
                section = marker.args[0]
                item.user_properties.append(("rfc_section", section))
