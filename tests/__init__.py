"""
Tests for the BugSpot reporter.

Test modules:
- unit/test_domain: report entities and results
- unit/test_context_collector: environment and runtime context
- unit/test_screenshot_service: scaling, previews and placeholders
- unit/test_create_bug_report: submission use case validation
- unit/test_bug_report_api: API repository and local fallback
- unit/test_http_client: BugSpot HTTP client
- unit/test_local_stores: JSON file and in-memory stores
- unit/test_pending_reports: pending report management
- unit/test_config: configuration and repository factory
- unit/test_system_probe: runtime environment probe
- unit/test_logging: structured logging
- integration/test_widget_flow: widget end to end and CLI
"""
