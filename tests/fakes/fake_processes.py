"""
Fake external processes for testing.

The script compiler and JS compressor are simulated by running the current
interpreter with small ``-c`` programs.
"""

import sys

EXIT_OK = "import sys; sys.exit(0)"
EXIT_TWO = "import sys; sys.exit(2)"
SLEEP_FOREVER = "import time; time.sleep(60)"

# Clears the screen like a compiler in watch mode, then reports an error
NOISY_ERROR = (
    "import sys; "
    "sys.stdout.write('\\x1b[2J\\x1b[3J\\x1b[H'); "
    "sys.stdout.write('src/main.ts(3,7): error TS2322: Type mismatch.\\n'); "
    "sys.stdout.flush(); "
    "sys.stderr.write('warning: raw stderr\\n'); "
    "sys.exit(2)"
)

QUIET_SUCCESS = "import sys; sys.stdout.write('Starting compilation...\\n'); sys.exit(0)"

# Writes one .js file next to the project's output root, like tsc does
EMIT_JS = (
    "import pathlib; "
    "out = pathlib.Path('app'); out.mkdir(exist_ok=True); "
    "(out / 'main.js').write_text('function add(a, b) { return a + b; }\\n')"
)

# Minifier stand-in: argv = [file, --compress, --mangle, -o, file]
FAKE_MINIFIER = (
    "import sys, pathlib; "
    "path = pathlib.Path(sys.argv[-1]); "
    "path.write_text('/*min*/' + path.read_text().replace(' ', ''))"
)


def python_command(code: str) -> tuple[str, ...]:
    """A command running ``code`` with the current interpreter."""
    return (sys.executable, "-c", code)
