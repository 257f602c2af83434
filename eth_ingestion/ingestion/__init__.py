from .pipeline import FetchPipeline, PipelineSummary

__all__ = ["FetchPipeline", "PipelineSummary"]
