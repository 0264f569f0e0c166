"""
The Supervisor package.
Manages the lifecycle of the supervised commands.

This package contains the central ProcessManager class and its helper modules,
which together handle validating, launching, waiting for and stopping
the child processes.
"""
from .supervisor import ProcessManager

__all__ = ['ProcessManager']
