"""
REST API module for WellPump.

Provides FastAPI endpoints for:
- Pump catalog CRUD and queries
- Total head calculation, filtering and pump selection
"""
