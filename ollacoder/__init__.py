# ollacoder/__init__.py
"""
Ollacoder - a coding assistant driven by a local Ollama model.
"""

__version__ = "0.1.0"
