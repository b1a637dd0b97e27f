"""MicroSim — a persistent household world simulation driven by an LLM."""

__version__ = "0.1.0"
