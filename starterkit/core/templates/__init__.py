"""
Template content written into generated projects.

Everything in this package is opaque data: the orchestrator copies it
into files verbatim and never parses or validates it.
"""
