"""
Shared test doubles for engine and use case flows.

The doubles implement the domain interfaces, so the engine runs its real
code paths without any model runtime.
"""

import asyncio
from datetime import date

import pytest

from docscan_bench.application.use_cases import BenchmarkEngine
from docscan_bench.config import Configuration
from docscan_bench.domain.document_type import DocumentType
from docscan_bench.domain.errors import ModelLoadFailed
from docscan_bench.domain.interfaces import (
    ExtractionResult,
    IDocumentDetector,
    IDocumentDetectorFactory,
    IModelCache,
    IOCREngine,
    IPDFRenderer,
    ITextModelFactory,
    ITextProvider,
    IVisualModelFactory,
    IVisualProvider,
)
from docscan_bench.domain.services import MemoryEstimator

GIB = 1024 ** 3


class FakeRenderer(IPDFRenderer):

    def __init__(self, error=None):
        self.error = error
        self.rendered = []

    def render_first_page(self, pdf_path, dpi):
        if self.error:
            raise self.error
        self.rendered.append(pdf_path)
        return f"image:{pdf_path}"


class FakeOCREngine(IOCREngine):

    def __init__(self, texts=None, failing=()):
        self.texts = texts or {}
        self.failing = set(failing)

    def extract_text(self, pdf_path):
        if pdf_path in self.failing:
            raise RuntimeError("tesseract failed")
        return self.texts.get(pdf_path, "")


class FakeVisualProvider(IVisualProvider):
    """Answers with a fixed response, or per image via a callable."""

    def __init__(self, response="Yes", delay=0.0, error=None):
        self.response = response
        self.delay = delay
        self.error = error
        self.calls = 0

    async def generate_from_image(self, image, prompt, model_name=None):
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.response(image) if callable(self.response) else self.response


class FakeVisualFactory(IVisualModelFactory):

    def __init__(self, provider=None, preload_error=None):
        self.provider = provider or FakeVisualProvider()
        self.preload_error = preload_error
        self.loaded = None
        self.preloaded = []
        self.release_count = 0

    async def preload(self, model_name, config):
        self.preloaded.append(model_name)
        if self.preload_error:
            raise self.preload_error
        self.loaded = model_name

    def make_provider(self):
        return self.provider if self.loaded else None

    async def release(self):
        self.release_count += 1
        self.loaded = None


class FakeTextProvider(ITextProvider):
    """
    Categorizes by keyword and returns a fixed extraction.

    Text containing "INVOICE" is answered YES, everything else NO.
    """

    def __init__(self, extraction=None, categorize_error=None, extract_error=None, delay=0.0):
        self.extraction = extraction or ExtractionResult()
        self.categorize_error = categorize_error
        self.extract_error = extract_error
        self.delay = delay
        self.generate_calls = 0
        self.extract_calls = 0

    async def generate(self, system_prompt, user_prompt, max_tokens):
        self.generate_calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.categorize_error:
            raise self.categorize_error
        document_text = user_prompt.split("Document text:\n", 1)[-1]
        return "YES" if "INVOICE" in document_text else "NO"

    async def extract_data(self, document_type, text):
        self.extract_calls += 1
        if self.extract_error:
            raise self.extract_error
        return self.extraction


class FakeTextFactory(ITextModelFactory):

    def __init__(self, provider=None, preload_error=None):
        self.provider = provider or FakeTextProvider()
        self.preload_error = preload_error
        self.loaded = None
        self.preloaded = []
        self.release_count = 0

    async def preload(self, model_name, config):
        self.preloaded.append(model_name)
        if self.preload_error:
            raise self.preload_error
        self.loaded = model_name

    def make_provider(self):
        return self.provider if self.loaded else None

    async def release(self):
        self.release_count += 1
        self.loaded = None


class FakeDetector(IDocumentDetector):
    """Treats paths containing "invoice" as matches."""

    def __init__(self, extraction, delay=0.0, error=None):
        self.extraction = extraction
        self.delay = delay
        self.error = error

    async def categorize(self, pdf_path):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return "invoice" in pdf_path

    async def extract_data(self):
        return self.extraction


class FakeDetectorFactory(IDocumentDetectorFactory):

    def __init__(self, extraction=None, delay=0.0, error=None, preload_error=None):
        self.extraction = extraction or ExtractionResult(date=date(2025, 6, 27), secondary_field="ACME GmbH")
        self.delay = delay
        self.error = error
        self.preload_error = preload_error
        self.preloaded = []
        self.detectors_made = 0
        self.release_count = 0

    async def preload_models(self, config):
        self.preloaded.append((config.visual_model_name, config.text_model_name))
        if self.preload_error:
            raise self.preload_error

    async def make_detector(self, config, document_type):
        self.detectors_made += 1
        return FakeDetector(self.extraction, delay=self.delay, error=self.error)

    async def release_models(self):
        self.release_count += 1


class FakeModelCache(IModelCache):

    def __init__(self):
        self.cleanups = []

    def model_directory(self, model_name):
        return f"/cache/models--{model_name.replace('/', '--')}"

    def cleanup(self, model_names, keep):
        names = list(model_names)
        self.cleanups.append((names, set(keep)))
        return [name for name in names if name not in keep]


@pytest.fixture
def configuration():
    return Configuration()


@pytest.fixture
def roomy_memory():
    """64 GiB of physical memory."""
    return MemoryEstimator(memory_source=lambda: 64 * GIB)


@pytest.fixture
def make_engine(configuration, roomy_memory):
    def _make(**overrides):
        kwargs = {
            "configuration": configuration,
            "document_type": DocumentType.INVOICE,
            "pdf_renderer": FakeRenderer(),
            "memory_estimator": roomy_memory,
        }
        kwargs.update(overrides)
        return BenchmarkEngine(**kwargs)
    return _make


@pytest.fixture
def fakes():
    """Namespace of the doubles above for use inside tests."""
    class _Fakes:
        Renderer = FakeRenderer
        OCREngine = FakeOCREngine
        VisualProvider = FakeVisualProvider
        VisualFactory = FakeVisualFactory
        TextProvider = FakeTextProvider
        TextFactory = FakeTextFactory
        DetectorFactory = FakeDetectorFactory
        ModelCache = FakeModelCache
    return _Fakes


@pytest.fixture
def load_failure():
    return ModelLoadFailed("weights not found")
