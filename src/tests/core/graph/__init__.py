"""Tests for the graph engine.

1. Builder and compilation (test_base.py)
2. State and merge rules (test_state.py)
3. Wavefront execution, failure policy and deadlines (test_engine.py)
4. Router helpers and fan-in (test_routing.py)
5. Batch runs (test_batch.py)
6. Visualization (test_viz.py)
7. Node base classes (nodes/)
"""
