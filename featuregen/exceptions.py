"""
FeatureGen Exceptions
Error types raised by the generation, analysis and storage layers
"""


class FeatureGenError(Exception):
    """Base exception for FeatureGen errors"""
    pass


class GenerationError(FeatureGenError):
    """Raised when the LLM fails to produce a usable feature file"""
    pass


class AnalysisError(FeatureGenError):
    """Raised when complexity scoring fails (provider error, timeout, malformed output)"""
    pass


class AnalysisInProgressError(FeatureGenError):
    """Raised when an analysis is already running for the same feature"""

    def __init__(self, feature_id: int):
        self.feature_id = feature_id
        super().__init__(f"Analysis already in progress for feature {feature_id}")


class FeatureNotFoundError(FeatureGenError):
    """Raised when a feature (or epic) id does not exist in the store"""
    pass
