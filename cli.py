"""CLI entry point for mailchimp-connect."""
import argparse

import requests

from config import load_settings
from main import VERSION, run


# ============== Helper Functions ==============

def fetch_health(host: str, port: int) -> dict:
    """Query /health of a running server; empty dict if it is not up."""
    try:
        response = requests.get(f"http://{host}:{port}/health", timeout=2)
        if response.status_code == 200:
            return response.json()
    except (requests.RequestException, ValueError):
        pass
    return {}


def _mask(value: str) -> str:
    if not value:
        return "(not set)"
    return f"{value[:4]}..." if len(value) > 4 else "****"


# ============== Commands ==============

def cmd_start():
    """Run the server in the foreground."""
    run(load_settings())


def cmd_status():
    """Show configuration and whether the server is running."""
    settings = load_settings()

    print("\n" + "=" * 50)
    print("  Mailchimp Connect Status")
    print("=" * 50)

    print("\n[OAuth]")
    print(f"  Status:       {'Configured' if settings.oauth_configured() else 'Not configured'}")
    print(f"  Client ID:    {settings.client_id or '(not set)'}")
    print(f"  Secret:       {_mask(settings.client_secret)}")
    print(f"  Redirect URI: {settings.redirect_uri}")

    print("\n[Signup]")
    print(f"  Status:       {'Configured' if settings.signup_configured() else 'Not configured'}")
    print(f"  Instance:     {settings.instance or '(not set)'}")
    print(f"  List ID:      {settings.list_id or '(not set)'}")
    print(f"  API key:      {_mask(settings.api_key)}")

    print("\n[Logging]")
    if settings.supabase_url and settings.supabase_anon_key:
        print(f"  Supabase:     {settings.supabase_url}")
    else:
        print("  Supabase:     Disabled (stderr only)")

    print("\n[Server]")
    health = fetch_health(settings.host, settings.port)
    if health:
        print(f"  Status:       Running on http://{settings.host}:{settings.port}")
        print(f"  Connected:    {health.get('connected_accounts', 0)} account(s)")
    else:
        print("  Status:       Not running")

    print("\n" + "=" * 50 + "\n")


def cmd_version():
    """Show version information."""
    print(f"mailchimp-connect v{VERSION}")


def cmd_help():
    """Show detailed help."""
    print("""
Mailchimp Connect - newsletter signup and Mailchimp OAuth browser

USAGE:
    mailchimp-connect <command>

COMMANDS:
    start       Run the server in the foreground
    status      Show configuration and server status
    version     Show version information
    help        Show this help message

CONFIGURATION:
    Set MAILCHIMP_CLIENT_ID, MAILCHIMP_CLIENT_SECRET, MAILCHIMP_API_KEY and
    MAILCHIMP_LIST_ID in the environment or in a .env file.
""")


# ============== Main Entry Point ==============

def main():
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        prog="mailchimp-connect",
        description="Mailchimp Connect - newsletter signup and Mailchimp OAuth browser",
    )
    parser.add_argument(
        "command",
        nargs="?",
        default="start",
        choices=["start", "status", "version", "help"],
        help="Command to run (default: start)"
    )

    args = parser.parse_args()

    if args.command == "start":
        cmd_start()
    elif args.command == "status":
        cmd_status()
    elif args.command == "version":
        cmd_version()
    elif args.command == "help":
        cmd_help()
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
