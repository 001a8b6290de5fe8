"""
BugSpot reporter - capture, enrich and submit bug reports from Python apps.

Layers:
- domain: report entities and typed results
- interfaces: repository / probe / screenshot contracts
- application: the submission use case
- services: context collection, screenshots, logging
- infrastructure: API client, local stores, environment probes
"""
__version__ = "1.0.0"
