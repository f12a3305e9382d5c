"""Core domain package for insightscope.

Core contains validation, highlighting, history and the submission pipeline
without any Textual, LiteLLM or storage-specific code.
"""
