"""
Entry point for running the ball tracking system as a module.

Usage:
    python -m ball_tracking [hours]
"""

from .cli import main

if __name__ == "__main__":
    main()
