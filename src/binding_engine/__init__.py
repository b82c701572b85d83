"""Binding Engine — assigns weighted game actions to physical keys.

Sub-package containing:
    models        – fingers, actions, keys, bindings
    settings      – explicit configuration structs
    keymaps       – ANSI keyboard and mouse key definitions
    geometry      – key centres, distances, radius queries
    key_scorer    – per-key reach cost from resting positions
    movement      – directional-action axis mapping, concurrency graph
    allocator     – greedy pass with displacement repair
    cost_model    – friction of a complete layout
    seeded_random – reproducible LCG
    annealing     – simulated-annealing layout search
    presets       – YAML preset and action-list loading
    pipeline      – orchestrates scoring + allocation and builds reports
"""
