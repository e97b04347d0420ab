import os

# headless plotting for report tests
os.environ.setdefault("MPLBACKEND", "Agg")
