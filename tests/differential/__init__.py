"""
Property-based tests over whole differential sessions.

Hypothesis draws session seeds; each property runs complete sessions and
checks a guarantee of the harness itself (reproducibility, symmetry,
fail-fast) or a known-broken candidate scenario.

Usage:
    pytest tests/differential/ -v
    pytest tests/differential/ -v --hypothesis-seed=42  # Reproducible
    pytest tests/differential/ --hypothesis-profile=dev
"""
