"""Log once and keep running until killed."""

import time

print("running")
while True:
    time.sleep(1)
