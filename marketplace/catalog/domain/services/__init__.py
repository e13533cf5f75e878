from .catalog_service import CatalogService
from .review_analyzer import ReviewAnalyzer
from .review_metrics_service import ReviewMetricsService
from .review_service import ReviewService
from .trust_service import ScoringUnavailable, Scored, TrustService
from .upload_service import UploadService


__all__ = [
    "CatalogService",
    "ReviewAnalyzer",
    "ReviewMetricsService",
    "ReviewService",
    "Scored",
    "ScoringUnavailable",
    "TrustService",
    "UploadService",
]
