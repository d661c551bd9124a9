"""
Conformance Test Suite

This suite defines the NORMATIVE behavior of the replay engine.
Any compliant implementation MUST pass these tests.

The tests are organized by invariant:
1. test_replay_consistency.py - Running balances chain without gaps
2. test_aggregate_agreement.py - Totals agree with replayed balances
3. test_reconstruction.py - Walking backward from the current balance
4. test_idempotency.py - Identical inputs give identical outputs
5. test_boundaries.py - Empty input, sign convention, boundary instants

These tests use hypothesis for property-based testing.
"""
