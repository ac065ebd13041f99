import os
import sys


# Ensure `src/backend` is on sys.path so imports like `import common...` work.
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

import pytest


@pytest.fixture
def browser_script():
    def _make(body: str = "", *, legacy: bool = False) -> str:
        if legacy:
            return f"$browser.get('https://example.com');\n{body}\n"
        return (
            "async function run() {\n"
            "  await $browser.get('https://example.com');\n"
            f"  {body}\n"
            "}\n"
            "run();\n"
        )

    return _make
