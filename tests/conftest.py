import os
from pathlib import Path

import pytest

# Test layer marker per directory under tests/<context>/
_LAYER_MARKERS = {
    "domain": pytest.mark.domain,
    "application": pytest.mark.application,
    "integration": pytest.mark.integration,
    "bdd": pytest.mark.bdd,
}


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Protean configuration overlay (PROTEAN_ENV) for the run",
    )


def pytest_sessionstart(session):
    """Select the Protean overlay and quiet logging before any domain module is imported."""
    os.environ["PROTEAN_ENV"] = session.config.option.env
    os.environ.setdefault("LOG_LEVEL", "WARNING")


def pytest_collection_modifyitems(config, items):
    """Mark each test with its layer, taken from the directory it lives in."""
    for item in items:
        parts = Path(str(item.fspath)).parts
        layer = next((part for part in parts if part in _LAYER_MARKERS), None)
        if layer is None:
            continue

        item.add_marker(_LAYER_MARKERS[layer])
        # Worker threads and the HTTP stack make these slower
        if layer == "integration" and item.get_closest_marker("fast") is None:
            item.add_marker(pytest.mark.slow)
