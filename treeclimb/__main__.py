"""Package entry-point.

Run:
    python -m treeclimb

This will replay the altitude readings through the climb detector
(see treeclimb.run_pipeline).
"""

from .run_pipeline import main

if __name__ == "__main__":
    main()
