#!/usr/bin/env python3
"""Entry point for dis-dbg CLI debugger."""

from __future__ import annotations

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
