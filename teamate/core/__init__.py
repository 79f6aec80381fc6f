"""
Core business logic modules for Teamate.

Submodules:
- matching: Pairwise scoring, optimal assignment and matching runs
"""
