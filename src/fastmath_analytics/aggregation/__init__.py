"""Aggregation module for session analytics.

- Reads session items through a SessionStore and produces summaries
  (per user-day averages, per-fact stage time percentiles)
- Forbidden: store writes, HTTP concerns
"""
