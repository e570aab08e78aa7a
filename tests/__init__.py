"""
Test suite for atomic-store.

Focus areas:
- Cell runtime: caching, dependency tracking, cycles, notification
- Definition classification
- Root state aggregation
- Store assembly, derived state and action dispatch
- Configuration loading
"""
