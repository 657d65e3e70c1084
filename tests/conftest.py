import pytest


@pytest.fixture
def log_lines():
    return [
        "2024-03-01 12:00:01 INFO  worker-1 started job=42",
        "2024-03-01 12:00:02 WARN  worker-2 retrying job=17 attempt=2",
        "",
        "2024-03-01 12:00:03 ERROR worker-1 job=42 failed: timeout after 30s",
        "  indented continuation line\twith a tab",
        "naïve café — unicode survives ✓",
        "2024-03-01 12:00:04 INFO  worker-3 idle",
    ]
