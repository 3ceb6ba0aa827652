from .fallback_manager import FailoverOrchestrator, candidate_order, catalog_model_resolver
from .pipeline import CoWritePipeline, PipelineContext

__all__ = [
    "CoWritePipeline",
    "FailoverOrchestrator",
    "PipelineContext",
    "candidate_order",
    "catalog_model_resolver"
]
