"""
Test package for the danielsson module.

Subdirectories mirror the structure of the main package:
- core: Tests for the vector field, the propagation passes and the transform

To run all tests:
    python -m unittest discover tests
"""

import sys
from pathlib import Path

# Add the project root to the path for proper imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.append(str(project_root))
