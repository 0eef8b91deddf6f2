import sys
from pathlib import Path

# Flat layout: make huffman.py / experiments.py importable without installing
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
