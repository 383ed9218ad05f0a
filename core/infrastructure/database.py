"""
Database utilities and transaction management.
"""

import contextlib
from typing import Iterator

from django.db import transaction


@contextlib.contextmanager
def atomic_transaction(using: str = None) -> Iterator[None]:
    """
    Context manager for an all-or-nothing unit of work.

    Any exception raised inside the block rolls back every write made
    through the repositories while it was open.

    Usage:
        with atomic_transaction():
            # Database operations
            pass
    """
    with transaction.atomic(using=using):
        yield
