"""Interfaces - Dependency contracts for use cases"""
from .worker_runner import IWorkerRunner

__all__ = ["IWorkerRunner"]
