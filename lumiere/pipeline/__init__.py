from .editorial_pipeline import EditorialPipeline

__all__ = ["EditorialPipeline"]
