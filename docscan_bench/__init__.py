"""
DocScan Benchmark Package

Benchmark orchestration for visual + text model pairs used in document
categorization and field extraction.

Architecture:
- Each candidate model runs in an isolated worker subprocess
- Outputs are scored against fuzzy-matched ground truth sidecars
- Disqualified candidates are reported but never ranked
"""

__version__ = "0.1.0"
