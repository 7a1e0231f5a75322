"""Clear cached app.* modules before test collection.

Each test module puts membership-signup/ on sys.path and imports ``app.*``
at module level, so every file binds its own copies of the modules it
patches.
"""

import sys


def pytest_collect_file(parent, file_path):
    if file_path.suffix == ".py" and file_path.name.startswith("test_"):
        for key in list(sys.modules.keys()):
            if key == "app" or key.startswith("app."):
                del sys.modules[key]
    return None
