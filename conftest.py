"""
Root conftest.py for the Parish Booker project.

Makes the service packages importable when pytest runs from the
repository root without an editable install.
"""

import sys
from pathlib import Path


def pytest_configure(config):
    """
    Add every service directory under services/ to sys.path.

    Each service directory holds one importable package next to its tests.
    """
    root_dir = Path(__file__).parent

    for service_path in sorted((root_dir / "services").iterdir()):
        if service_path.is_dir() and str(service_path) not in sys.path:
            sys.path.insert(0, str(service_path))
