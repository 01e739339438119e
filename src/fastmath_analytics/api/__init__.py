"""API module for FastMath session analytics.

Read-only HTTP layer (api boundary):
- Validates query parameters, scans the session store
- Returns report payloads for the admin dashboard
- Forbidden: store writes, aggregation logic beyond calling into aggregation/
"""
