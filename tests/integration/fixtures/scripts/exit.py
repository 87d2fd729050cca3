"""Log to both streams, then exit with $EXIT_CODE."""

import os
import sys
import time

code = int(os.environ.get("EXIT_CODE", "0"))
print(f"exit code is set to: {code}")
print("stdout")
time.sleep(0.2)
print("stderr", file=sys.stderr)
sys.exit(code)
