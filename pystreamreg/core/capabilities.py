"""
Capability string constants for PyStreamReg.

This module is the SINGLE SOURCE OF TRUTH for capability strings.
Import from here, never use raw strings.

Usage:
    from pystreamreg.core.capabilities import CAPABILITY_STREAMING

    if ds.supports(CAPABILITY_STREAMING):
        for batch in ds.batches(1000):
            model.add_observations(batch['X'], batch['y'])
"""

# Data can be returned as full numpy arrays in memory
CAPABILITY_MATERIALIZED = 'materialized'

# Data can be yielded in batches
CAPABILITY_STREAMING = 'streaming'

# Data can be iterated multiple times
CAPABILITY_REPEATABLE = 'repeatable'
