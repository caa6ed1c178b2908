import sys
from pathlib import Path

# Para testes de freight, força src/freight no topo do path ("from schemas import", "from service import")
_root = Path(__file__).resolve().parents[2]
freight_path = str(_root / "src" / "freight")
src_path = str(_root / "src")

for path in [freight_path, src_path]:
    if path in sys.path:
        sys.path.remove(path)
    sys.path.insert(0, path)
