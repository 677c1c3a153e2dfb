import json
import logging
import os
import time
from enum import Enum
from typing import Any

from pythonjsonlogger import jsonlogger

LOG_LEVEL = os.getenv("DOCSCAN_LOG_LEVEL", "INFO").upper()


class ComponentType(str, Enum):
    ENGINE = "engine"
    WORKER = "worker"
    RUNNER = "runner"
    GROUND_TRUTH = "ground_truth"
    CLEANUP = "cleanup"
    SWEEP = "sweep"


class BenchJSONFormatter(jsonlogger.JsonFormatter):
    def add_fields(self, log_record, record, message_dict):
        super(BenchJSONFormatter, self).add_fields(log_record, record, message_dict)
        if not log_record.get('timestamp'):
            log_record['timestamp'] = time.time()
        if log_record.get('level'):
            log_record['level'] = log_record['level'].upper()
        else:
            log_record['level'] = record.levelname


def get_logger(name: str):
    logger = logging.getLogger(name)
    # Repeated calls must not stack handlers
    if not any(isinstance(h.formatter, BenchJSONFormatter) for h in logger.handlers):
        handler = logging.StreamHandler()
        formatter = BenchJSONFormatter('%(timestamp)s %(level)s %(name)s %(message)s')
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    logger.propagate = False
    return logger


class StructuredLogger:
    def __init__(self, component: ComponentType):
        self.logger = get_logger(f"docscan_bench.{component.value}")
        self.component = component

    def log_event(self, event_type: str, level: int = logging.INFO, **fields: Any):
        """Log a benchmark lifecycle event with arbitrary JSON-safe fields."""
        entry = {
            "component": self.component.value,
            "event_type": event_type,
            **fields,
        }
        self.logger.log(level, json.dumps(entry, default=str))

    def warning(self, event_type: str, **fields: Any):
        self.log_event(event_type, level=logging.WARNING, **fields)
