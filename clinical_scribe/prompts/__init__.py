"""Centralized prompt templates for the optional LLM enhancement.

Import any prompt constant directly:
    from clinical_scribe.prompts import SOAP_SYSTEM, SUMMARY_USER
"""

from clinical_scribe.prompts.soap import SOAP_SYSTEM, SOAP_USER
from clinical_scribe.prompts.summary import SUMMARY_SYSTEM, SUMMARY_USER
from clinical_scribe.prompts.transcript import (
    TRANSCRIPT_STRUCTURE_SYSTEM,
    TRANSCRIPT_STRUCTURE_USER,
)

__all__ = [
    "SOAP_SYSTEM",
    "SOAP_USER",
    "SUMMARY_SYSTEM",
    "SUMMARY_USER",
    "TRANSCRIPT_STRUCTURE_SYSTEM",
    "TRANSCRIPT_STRUCTURE_USER",
]
