"""
Presentation Layer

Command-line entry points: the benchmark sweep and the isolated worker.
"""
