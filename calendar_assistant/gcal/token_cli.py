"""Obtain a Google OAuth refresh token for the calendar gateway.

Usage:
    python -m calendar_assistant.gcal.token_cli client_secret.json
"""

import argparse
import sys

from google_auth_oauthlib.flow import InstalledAppFlow

from .auth import SCOPES


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        description="Run the Google OAuth consent flow and print a refresh token",
        prog="calendar-assistant-token",
    )
    parser.add_argument(
        "client_secrets",
        help="Path to the OAuth client secrets JSON downloaded from Google Cloud Console",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=0,
        help="Local port for the OAuth redirect (default: any free port)",
    )
    return parser


def main() -> None:
    """Main entry point for CLI."""
    args = create_parser().parse_args()

    try:
        flow = InstalledAppFlow.from_client_secrets_file(args.client_secrets, SCOPES)
        # prompt=consent forces Google to issue a refresh token every time
        creds = flow.run_local_server(port=args.port, access_type="offline", prompt="consent")
    except KeyboardInterrupt:
        print("\nCancelled by user")
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if not creds.refresh_token:
        print("Error: Google did not return a refresh token", file=sys.stderr)
        sys.exit(1)

    print("Add this to the google_calendar section of config.yaml:\n")
    print(f"  client_id: {creds.client_id}")
    print(f"  client_secret: {creds.client_secret}")
    print(f"  refresh_token: {creds.refresh_token}")


if __name__ == "__main__":
    main()
