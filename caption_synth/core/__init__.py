"""Caption script synthesis engine.

WHY: The core package is the part of the project with real invariants:
packed colours, coordinate placement, time-phased animation tags, and
exact chunk timing. Everything else (CLI, HTTP API, input adapter) is glue
around it.

HOW: ir.py defines the value types, colors/positions/presets resolve the
style, animations/chunker produce markup, assembler.py writes the script.

RULES:
- The engine is a pure function of its inputs except for write()
- No module here does network or subprocess I/O
"""
