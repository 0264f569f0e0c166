"""
multirun: run several commands as one unit.

When any supervised command exits, every other command's process group is
signalled, and the supervisor exits once all of them have been reaped.
"""

__version__ = "0.1.0"
