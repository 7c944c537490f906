"""Entry point for `python -m kubeinformer`.

Usage:
    python -m kubeinformer
    KUBEINFORMER_KIND=pod KUBEINFORMER_NAMESPACE=default python -m kubeinformer
"""

from __future__ import annotations

import asyncio

from kubeinformer.app import main

asyncio.run(main())
