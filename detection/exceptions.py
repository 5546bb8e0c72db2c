"""
Error taxonomy for the detection pipeline.

None of these escape `LanguageDetector.detect`: validation errors become an
`error` result, remote errors trigger the offline fallback and classifier
initialisation errors degrade to an `unknown` verdict.
"""

from __future__ import annotations


class LanguageDetectionError(Exception):
    """Base class for every pipeline error."""


class TextValidationError(LanguageDetectionError):
    """Input is empty or shorter than the configured minimum length."""


class RemoteTimeoutError(LanguageDetectionError):
    """The remote tier did not settle within its time budget."""


class RemoteModelError(LanguageDetectionError):
    """Network or model failure while calling a remote endpoint."""


class ClassifierInitializationError(LanguageDetectionError):
    """The local statistical model could not be loaded."""
