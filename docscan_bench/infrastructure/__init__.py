"""
Infrastructure Layer

Concrete implementations of the domain and application interfaces:
model runtimes, PDF rendering and OCR, sidecar files, the model cache and
worker processes.
"""
