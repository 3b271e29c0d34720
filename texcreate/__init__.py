"""
texcreate - LaTeX project compilation configuration

Keeps a small per-project configuration (compiler, flags, clean-up, invocation
mode) in a ``compiler.toml`` file and drives the external LaTeX compiler with it.

Architecture:
- Rendering Context: compiler configuration, persistence and compilation
- Utils: logging setup, environment settings, timestamps
"""

__version__ = "0.1.0"
