import sys
from pathlib import Path

# Add python directory to sys.path to allow importing handlershim without installation
root_dir = Path(__file__).parent
python_dir = root_dir / "python"
sys.path.insert(0, str(python_dir))
