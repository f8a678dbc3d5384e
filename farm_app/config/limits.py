"""
Configurable limits for barn allocation and balancing.

Override per deployment through Settings if needed.
"""

from __future__ import annotations

# Head count a newly built barn can hold
DEFAULT_BARN_CAPACITY = 20

# Upper bound on redistribution steps in one add/remove before giving up
MAX_BALANCE_ITERATIONS = 10_000

# Prefix of generated barn names ("Barn - RED")
BARN_NAME_PREFIX = "Barn - "
