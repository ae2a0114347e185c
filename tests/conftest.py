# tests/conftest.py
import sys
import logging
from pathlib import Path

# Make the src layout importable without installing the package
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

# Configure minimal logging for tests
logging.basicConfig(
    level=logging.WARNING,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

# Disable SQLAlchemy INFO messages during tests
logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)
