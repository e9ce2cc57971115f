#!/usr/bin/env python3
"""Entry point for ``python -m disvm``."""

from __future__ import annotations

from .host import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
