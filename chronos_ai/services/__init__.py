from .narrative_service import NarrativeAIService, analyze_temporal_gaps

__all__ = ["NarrativeAIService", "analyze_temporal_gaps"]
