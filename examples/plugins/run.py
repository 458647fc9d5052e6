import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))
os.environ.setdefault("MICROUT_PLUGINS", "plugin")

import microut  # noqa: E402

if __name__ == "__main__":
    raise SystemExit(microut.run(sys.argv[1:], progress=True))
