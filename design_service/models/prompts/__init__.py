"""
Prompt templates for the design pipeline.
"""
from .templates import (
    PromptTemplate,
    PromptLibrary,
    PromptType,
)

# Create an instance of PromptLibrary
prompts = PromptLibrary()

__all__ = [
    'PromptTemplate',
    'PromptLibrary',
    'PromptType',
    'prompts'
]
