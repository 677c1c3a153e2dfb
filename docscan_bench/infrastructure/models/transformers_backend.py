"""
Infrastructure: Transformers Backends

Synchronous wrappers around HuggingFace transformers models. Loading and
generation block, so the async providers run them in worker threads.
"""

import gc
from typing import Any, Optional

import torch
from transformers import (
    AutoModelForCausalLM,
    AutoModelForImageTextToText,
    AutoProcessor,
    AutoTokenizer,
)


def default_device() -> str:
    return "cuda" if torch.cuda.is_available() else "cpu"


def free_accelerator_memory() -> None:
    gc.collect()
    if torch.cuda.is_available():
        torch.cuda.empty_cache()


def _sampling_kwargs(temperature: float) -> dict:
    if temperature > 0:
        return {"do_sample": True, "temperature": temperature}
    return {"do_sample": False}


class TextTransformersBackend:
    """
    Causal language model with its tokenizer.

    Wraps the model and tokenizer for chat-style generation.
    """

    def __init__(
        self,
        model_id: str,
        device: Optional[str] = None,
        cache_dir: Optional[str] = None,
    ):
        """
        Load tokenizer and model.

        Args:
            model_id: HuggingFace model identifier
            device: Device to run on, detected when omitted
            cache_dir: Optional download directory
        """
        self.model_id = model_id
        self.device = device or default_device()

        self.tokenizer = AutoTokenizer.from_pretrained(model_id, cache_dir=cache_dir)

        load_kwargs = {"torch_dtype": torch.float16} if "cuda" in self.device else {}
        self.model = AutoModelForCausalLM.from_pretrained(model_id, cache_dir=cache_dir, **load_kwargs).to(self.device)
        self.model.eval()

    def generate(self, system_prompt: str, user_prompt: str, max_tokens: int, temperature: float = 0.0) -> str:
        """
        Generate a reply to a system + user message pair.

        Returns:
            Generated text without the prompt
        """
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]
        if self.tokenizer.chat_template:
            prompt = self.tokenizer.apply_chat_template(messages, tokenize=False, add_generation_prompt=True)
        else:
            prompt = f"{system_prompt}\n\n{user_prompt}\n"

        inputs = self.tokenizer(prompt, return_tensors="pt").to(self.device)

        with torch.no_grad():
            outputs = self.model.generate(
                **inputs,
                max_new_tokens=max_tokens,
                pad_token_id=self.tokenizer.eos_token_id,
                **_sampling_kwargs(temperature),
            )

        # Decode only the generated portion
        generated = outputs[0][inputs["input_ids"].shape[1]:]
        return self.tokenizer.decode(generated, skip_special_tokens=True).strip()

    def close(self) -> None:
        self.model = None
        self.tokenizer = None
        free_accelerator_memory()


class VisualTransformersBackend:
    """Image-text-to-text model with its processor."""

    def __init__(
        self,
        model_id: str,
        device: Optional[str] = None,
        cache_dir: Optional[str] = None,
    ):
        self.model_id = model_id
        self.device = device or default_device()

        self.processor = AutoProcessor.from_pretrained(model_id, cache_dir=cache_dir)

        load_kwargs = {"torch_dtype": torch.float16} if "cuda" in self.device else {}
        self.model = AutoModelForImageTextToText.from_pretrained(
            model_id, cache_dir=cache_dir, **load_kwargs
        ).to(self.device)
        self.model.eval()

    def generate(self, image: Any, prompt: str, max_tokens: int, temperature: float = 0.0) -> str:
        messages = [
            {
                "role": "user",
                "content": [{"type": "image"}, {"type": "text", "text": prompt}],
            }
        ]
        text = self.processor.apply_chat_template(messages, add_generation_prompt=True)
        inputs = self.processor(text=[text], images=[image], return_tensors="pt").to(self.device)

        with torch.no_grad():
            outputs = self.model.generate(
                **inputs,
                max_new_tokens=max_tokens,
                **_sampling_kwargs(temperature),
            )

        generated = outputs[:, inputs["input_ids"].shape[1]:]
        return self.processor.batch_decode(generated, skip_special_tokens=True)[0].strip()

    def close(self) -> None:
        self.model = None
        self.processor = None
        free_accelerator_memory()
