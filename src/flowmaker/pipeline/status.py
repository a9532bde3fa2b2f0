"""Common status codes for flow steps and CLI handlers."""

from __future__ import annotations

# Successful completion of a step
DONE = 0

# Step failed; the flow carries on with the next step
FAILED = 1

# Bad command-line usage
USAGE = 2

# Operator declined the step
SKIPPED = 10
