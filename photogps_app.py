import sys
from pathlib import Path

# Add src to path to ensure photogps package is found
sys.path.append(str(Path(__file__).parent / "src"))

from photogps.main import main

if __name__ == "__main__":
    sys.exit(main())
