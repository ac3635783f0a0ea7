"""Starterkit — scaffolding orchestrator for Next.js SaaS starters."""

__version__ = "0.1.0"
