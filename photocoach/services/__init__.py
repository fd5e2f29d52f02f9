"""Services module - provides external service integrations."""

from .prompt_client import PromptClient

__all__ = ['PromptClient']
