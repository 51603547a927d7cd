from app.text_redaction.factory import TextRedactorFactory
from app.text_redaction.pattern_detector import PatternDetector
from app.text_redaction.redactor import TextRedactor

__all__ = ["PatternDetector", "TextRedactor", "TextRedactorFactory"]
