"""
BugSpot command line interface.

Submit reports, capture screenshots and manage reports that were saved
locally because the API was unreachable.
"""
import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from bugspot import __version__
from bugspot.config import WidgetConfig
from bugspot.domain.bug_report import Severity
from bugspot.domain.errors import ReportStorageError
from bugspot.infrastructure.environment import SystemEnvironmentProbe
from bugspot.infrastructure.repository_factory import RepositoryFactory
from bugspot.services.logging import configure_logging
from bugspot.services.pending_reports import PendingReportService
from bugspot.services.screenshot_service import ScreenshotService, decode_data_url
from bugspot.widget import BugSpotWidget


def _build_config(args: argparse.Namespace) -> WidgetConfig:
    config = WidgetConfig.from_env(getattr(args, 'env_file', None))
    return config.with_overrides(
        api_key=getattr(args, 'api_key', None),
        api_url=getattr(args, 'api_url', None),
        storage_dir=getattr(args, 'storage_dir', None),
        timeout=getattr(args, 'timeout', None),
    )


def cmd_submit(args: argparse.Namespace, config: WidgetConfig) -> int:
    probe = SystemEnvironmentProbe(url=args.url or "", app_name=args.app_name)
    widget = BugSpotWidget(config, probe=probe)
    try:
        result = widget.submit(
            title=args.title,
            description=args.description,
            severity=args.severity,
            email=args.email,
            steps=args.steps,
            tags=args.tags,
            capture_screenshot=args.screenshot and config.enable_screenshot,
        )
    finally:
        widget.close()

    if args.json:
        print(json.dumps(result.to_dict()))
    elif result.success and result.stored_locally:
        print(f"API unreachable - report saved locally as {result.id}")
    elif result.success:
        print(f"Report submitted: {result.id}")
    else:
        print(f"Error: {result.error}", file=sys.stderr)
    return 0 if result.success else 1


def cmd_capture(args: argparse.Namespace, config: WidgetConfig) -> int:
    probe = SystemEnvironmentProbe(url=args.url or "")
    capture = ScreenshotService(probe=probe).capture_with_preview()
    data_url = capture.preview if args.preview else capture.data_url
    if args.output:
        Path(args.output).write_bytes(decode_data_url(data_url))
        note = " (placeholder)" if capture.is_placeholder else ""
        print(f"Saved {capture.width}x{capture.height} screenshot to {args.output}{note}")
    else:
        print(data_url)
    return 0


def cmd_pending(args: argparse.Namespace, config: WidgetConfig) -> int:
    service = PendingReportService(RepositoryFactory.create_local_store(config))
    try:
        if args.pending_action == 'list':
            records = service.list_pending()
            if not records:
                print("No pending reports.")
            for record in records:
                print(f"{record.get('id')}  {record.get('timestamp', '')}  "
                      f"[{record.get('severity', '')}] {record.get('title', '')}")
        elif args.pending_action == 'export':
            exported = service.export_json()
            if args.output:
                Path(args.output).write_text(exported, encoding='utf-8')
                print(f"Exported to {args.output}")
            else:
                print(exported)
        elif args.pending_action == 'delete':
            if not service.delete(args.report_id):
                print(f"No pending report with id {args.report_id}", file=sys.stderr)
                return 1
            print(f"Deleted {args.report_id}")
        elif args.pending_action == 'clear':
            removed = service.clear()
            print(f"Removed {removed} pending report(s).")
    except ReportStorageError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bugspot",
        description="BugSpot reporter - submit bug reports with screenshots and context",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  submit           Submit a bug report (saved locally if the API is unreachable)
  capture          Capture a screenshot as a data URL or image file
  pending          List, export, delete or clear locally saved reports

Examples:
  bugspot submit --title "Save fails" --description "Clicking Save does nothing"
  bugspot submit -t "Crash" -d "App closes" --severity critical --screenshot
  bugspot capture --output shot.jpg
  bugspot pending list
  bugspot pending export --output pending.json
        """
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--env-file', help='Path to a .env file')
    parser.add_argument('--storage-dir', help='Directory for locally saved reports')
    parser.add_argument('--log-level', help='DEBUG, INFO, WARNING or ERROR')

    subparsers = parser.add_subparsers(dest='command', help='Command to execute')

    submit_parser = subparsers.add_parser('submit', help='Submit a bug report')
    submit_parser.add_argument('--title', '-t', required=True, help='Report title')
    submit_parser.add_argument('--description', '-d', required=True, help='What happened')
    submit_parser.add_argument('--severity', '-s', default=Severity.MEDIUM.value,
                               choices=[s.value for s in Severity], help='Severity (default: medium)')
    submit_parser.add_argument('--email', help='Reporter email')
    submit_parser.add_argument('--step', dest='steps', action='append', default=[],
                               help='Reproduction step (repeatable)')
    submit_parser.add_argument('--tag', dest='tags', action='append', default=[],
                               help='Tag (repeatable)')
    submit_parser.add_argument('--screenshot', action='store_true', help='Attach a screenshot')
    submit_parser.add_argument('--url', help='Location the bug was seen at')
    submit_parser.add_argument('--app-name', help='Application name for the user agent')
    submit_parser.add_argument('--api-key', help='Project API key (default: BUGSPOT_API_KEY)')
    submit_parser.add_argument('--api-url', help='API base URL (default: BUGSPOT_API_URL)')
    submit_parser.add_argument('--timeout', type=float, help='Request timeout in seconds')
    submit_parser.add_argument('--json', action='store_true', help='Print the result as JSON')

    capture_parser = subparsers.add_parser('capture', help='Capture a screenshot')
    capture_parser.add_argument('--output', '-o', help='Write the image to this file')
    capture_parser.add_argument('--preview', action='store_true', help='Output the preview thumbnail')
    capture_parser.add_argument('--url', help='Location printed on placeholder images')

    pending_parser = subparsers.add_parser('pending', help='Manage locally saved reports')
    pending_sub = pending_parser.add_subparsers(dest='pending_action')
    pending_sub.add_parser('list', help='List pending reports')
    export_parser = pending_sub.add_parser('export', help='Export all saved reports as JSON')
    export_parser.add_argument('--output', '-o', help='Write JSON to this file')
    delete_parser = pending_sub.add_parser('delete', help='Delete one saved report')
    delete_parser.add_argument('report_id', help='Local report id (local_...)')
    pending_sub.add_parser('clear', help='Delete all saved reports')

    return parser


COMMANDS = {
    'submit': cmd_submit,
    'capture': cmd_capture,
    'pending': cmd_pending,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command or (args.command == 'pending' and not args.pending_action):
        parser.print_help()
        return 1

    try:
        config = _build_config(args)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1
    configure_logging(args.log_level or config.log_level, json_format=config.log_json)

    return COMMANDS[args.command](args, config)


if __name__ == '__main__':
    sys.exit(main())
