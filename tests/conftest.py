# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

from datetime import datetime, timezone

import pytest

from dntarga import TimeStamp, WriterConfig

FIXED_NOW = datetime(2024, 3, 5, 6, 7, 8, tzinfo=timezone.utc)


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def writer_config():
    return WriterConfig(clock=lambda: FIXED_NOW)


@pytest.fixture
def fixed_stamp():
    return TimeStamp.from_datetime(FIXED_NOW)
