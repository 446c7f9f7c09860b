# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Reader and writer configuration

Copyright 2025 DNAi inc.
"""

from datetime import datetime, timezone
from typing import Callable, Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class WriterConfig:
    """
    Configuration for serialization.

    The extension area carries a date/time stamp; by default every save
    refreshes it with the current UTC time.
    """

    def __init__(
        self,
        stamp_timestamp: bool = True,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """
        Initialize writer configuration.

        Args:
            stamp_timestamp: Refresh the extension date/time stamp on save
            clock: Zero-argument callable returning the current UTC time
        """
        self.stamp_timestamp = stamp_timestamp
        self.clock = clock or utc_now

    def now(self) -> datetime:
        return self.clock()


class ReaderConfig:
    """
    Configuration for parsing.

    A file whose last 26 bytes are not a valid footer is read as a
    legacy (v1.0) image unless ``require_new_format`` is set.
    """

    def __init__(self, require_new_format: bool = False):
        """
        Initialize reader configuration.

        Args:
            require_new_format: Raise InvalidSignatureError instead of
                falling back to the legacy layout
        """
        self.require_new_format = require_new_format
