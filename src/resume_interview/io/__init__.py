"""
IO module for interview interfaces.

Provides the terminal interface and document loading for interviews.
"""

from resume_interview.io.document_loader import load_document
from resume_interview.io.text_interface import TextInterface

__all__ = ["TextInterface", "load_document"]
