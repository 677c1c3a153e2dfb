"""
Infrastructure: Transformers Providers and Factories

Async providers over the blocking transformers backends, and the per-type
factories that load and release them. A timed-out call stops being awaited
but its thread runs to completion; the worker process timeout bounds it.
"""

import asyncio
from typing import Any, Callable, Optional

from docscan_bench.config import Configuration, ProcessingSettings
from docscan_bench.domain.document_type import DocumentType
from docscan_bench.domain.errors import InferenceError, ModelLoadFailed
from docscan_bench.domain.interfaces import (
    ExtractionResult,
    ITextModelFactory,
    ITextProvider,
    IVisualModelFactory,
    IVisualProvider,
)
from docscan_bench.domain.services import ResponseParser
from docscan_bench.infrastructure.models.transformers_backend import (
    TextTransformersBackend,
    VisualTransformersBackend,
)


class TransformersTextProvider(ITextProvider):

    def __init__(
        self,
        backend: TextTransformersBackend,
        processing: ProcessingSettings,
        response_parser: Optional[ResponseParser] = None,
    ):
        self.backend = backend
        self.processing = processing
        self.response_parser = response_parser or ResponseParser()

    async def generate(self, system_prompt: str, user_prompt: str, max_tokens: int) -> str:
        try:
            return await asyncio.to_thread(
                self.backend.generate,
                system_prompt,
                user_prompt,
                max_tokens,
                self.processing.temperature,
            )
        except Exception as e:
            raise InferenceError(str(e)) from e

    async def extract_data(self, document_type: DocumentType, text: str) -> ExtractionResult:
        response = await self.generate(
            system_prompt=document_type.extraction_system_prompt,
            user_prompt=document_type.extraction_user_prompt(text),
            max_tokens=self.processing.max_tokens,
        )
        return self.response_parser.parse_extraction_response(response, document_type)


class TransformersVisualProvider(IVisualProvider):

    def __init__(self, backend: VisualTransformersBackend, processing: ProcessingSettings):
        self.backend = backend
        self.processing = processing

    async def generate_from_image(self, image: Any, prompt: str, model_name: Optional[str] = None) -> str:
        if model_name and model_name != self.backend.model_id:
            raise InferenceError(f"{model_name} is not loaded (loaded: {self.backend.model_id})")
        try:
            return await asyncio.to_thread(
                self.backend.generate,
                image,
                prompt,
                self.processing.max_tokens,
                self.processing.temperature,
            )
        except Exception as e:
            raise InferenceError(str(e)) from e


class _TransformersModelFactory:
    """Holds at most one loaded backend; preloading another model releases it first."""

    def __init__(self, backend_loader: Callable[..., Any], device: Optional[str] = None):
        self._backend_loader = backend_loader
        self._device = device
        self._backend = None
        self._config: Optional[Configuration] = None

    @property
    def loaded_model_name(self) -> Optional[str]:
        return self._backend.model_id if self._backend is not None else None

    async def preload(self, model_name: str, config: Configuration) -> None:
        if self.loaded_model_name == model_name:
            self._config = config
            return
        await self.release()
        try:
            self._backend = await asyncio.to_thread(
                self._backend_loader,
                model_name,
                device=self._device,
                cache_dir=config.model_cache_dir,
            )
        except Exception as e:
            raise ModelLoadFailed(f"{model_name}: {e}") from e
        self._config = config

    async def release(self) -> None:
        backend, self._backend = self._backend, None
        if backend is not None:
            await asyncio.to_thread(backend.close)


class TransformersTextModelFactory(_TransformersModelFactory, ITextModelFactory):

    def __init__(self, backend_loader: Callable[..., Any] = TextTransformersBackend, device: Optional[str] = None):
        super().__init__(backend_loader, device)

    def make_provider(self) -> Optional[ITextProvider]:
        if self._backend is None:
            return None
        return TransformersTextProvider(self._backend, self._config.processing)


class TransformersVisualModelFactory(_TransformersModelFactory, IVisualModelFactory):

    def __init__(self, backend_loader: Callable[..., Any] = VisualTransformersBackend, device: Optional[str] = None):
        super().__init__(backend_loader, device)

    def make_provider(self) -> Optional[IVisualProvider]:
        if self._backend is None:
            return None
        return TransformersVisualProvider(self._backend, self._config.processing)
