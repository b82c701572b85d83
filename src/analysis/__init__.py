"""Analysis — evaluating binding lists produced by the engine.

Sub-package containing:
    evaluator  – finger loads, load statistics, strategy comparison
    tables     – pandas views of scored keys and bindings
"""
