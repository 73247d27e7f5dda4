"""
LLM-facing code: prompt templates and output parsing.

Each subpackage owns one model interaction. Services call into these modules
and never build prompts or parse raw model text themselves.
"""
