"""
sys.modules isolation for API tests.

The API tests import ``app.api`` after putting membership-signup/ on
sys.path. Other test packages may already have imported ``app.*`` from
the same directory with patched storage paths, so cached entries are
dropped before each file is collected and every file starts from a clean
import.
"""

import sys


def pytest_collect_file(parent, file_path):
    if file_path.suffix == ".py" and file_path.name.startswith("test_"):
        for key in list(sys.modules.keys()):
            if key == "app" or key.startswith("app."):
                del sys.modules[key]
    return None
