"""Root conftest.py - configure pytest for standalone testing outside ComfyUI.

The root __init__.py imports the node modules, which need the package to be
importable by its directory name for their relative imports. We register the
root package as a bare module in sys.modules when it hasn't been imported
yet, so tests can import ``<root>.nodes`` without running __init__.py.
"""

import sys
import os
import types

project_root = os.path.dirname(os.path.abspath(__file__))
root_pkg_name = os.path.basename(project_root)

# Add project root to sys.path so `core` is importable
if project_root not in sys.path:
    sys.path.insert(0, project_root)

if root_pkg_name not in sys.modules:
    dummy = types.ModuleType(root_pkg_name)
    dummy.__path__ = [project_root]
    dummy.__file__ = os.path.join(project_root, "__init__.py")
    sys.modules[root_pkg_name] = dummy

# Create a mock for folder_paths (ComfyUI-specific module)
if "folder_paths" not in sys.modules:
    mock_fp = types.ModuleType("folder_paths")
    mock_fp.get_output_directory = lambda: "/tmp/comfyui_output"
    sys.modules["folder_paths"] = mock_fp

# Prevent pytest from collecting these files as tests
collect_ignore = [
    os.path.join(project_root, "__init__.py"),
]
