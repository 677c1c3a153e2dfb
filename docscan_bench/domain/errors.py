"""
Domain Errors

Exception taxonomy shared by every benchmark layer.

Per-document inference errors are absorbed by the engine into a zero score.
Load, memory and worker failures become disqualified results. Only corpus
level errors (missing sidecars, bad configuration) reach the caller.
"""


class DocScanError(Exception):
    """Base class for all benchmark errors."""

    prefix = "Error"

    def __init__(self, message: str = ""):
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return f"{self.prefix}: {self.message}" if self.message else self.prefix


class ModelLoadFailed(DocScanError):
    prefix = "Failed to load model"


class InferenceError(DocScanError):
    prefix = "Inference error"


class BenchmarkTimeout(DocScanError):
    """A single model call exceeded its per-document time limit."""

    prefix = "Timeout"

    def __init__(self, seconds: float, message: str = ""):
        self.seconds = seconds
        super().__init__(message or f"exceeded {seconds:g}s")


class DocumentFileNotFound(DocScanError, FileNotFoundError):
    prefix = "File not found"

    def __init__(self, path: str):
        self.path = path
        DocScanError.__init__(self, path)


class DecodingFailed(DocScanError):
    prefix = "Decoding failed"


class InsufficientMemory(DocScanError):
    prefix = "Insufficient memory"

    def __init__(self, required_mb: int, available_mb: int):
        self.required_mb = required_mb
        self.available_mb = available_mb
        super().__init__(f"~{required_mb} MB needed, {available_mb} MB available")

    def __str__(self) -> str:
        return f"Insufficient memory (~{self.required_mb} MB needed, {self.available_mb} MB available)"


class BenchmarkError(DocScanError):
    prefix = "Benchmark error"


class ConfigurationError(DocScanError):
    prefix = "Configuration error"


class PDFConversionFailed(DocScanError):
    prefix = "Failed to convert PDF"
