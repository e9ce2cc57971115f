"""
dis-dbg CLI package.

An interactive stepping debugger for the Dis machine.  Use
``python -m disvm.dis_dbg`` or the ``dis-dbg`` script to launch it.
"""

from __future__ import annotations

from .cli import main

__all__ = ["main"]
__version__ = "0.1.0"
