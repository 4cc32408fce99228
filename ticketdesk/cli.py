"""
Terminal front-end for the TicketDesk client

Usage:
    ticketdesk list [-q TEXT] [--status STATUS]
    ticketdesk show <ticket_id>
    ticketdesk create --title T --description D --reporter R [--priority P]
    ticketdesk status <ticket_id> <STATUS>
    ticketdesk comment <ticket_id> --author A --body B
    ticketdesk delete <ticket_id>

Logs go to stderr at WARNING and above; pass -v for INFO.
"""
import argparse
import asyncio
import sys
from typing import Dict, List, Optional

from dotenv import load_dotenv

from ticketdesk.config import ClientConfig, get_settings
from ticketdesk.controllers import (
    TicketDetailController,
    TicketFormController,
    TicketListController,
    ViewState,
)
from ticketdesk.errors import TicketDeskError
from ticketdesk.models.schemas import Comment, Priority, Ticket, TicketStatus
from ticketdesk.services.ticket_api import TicketDeskClient
from ticketdesk.utils.logger import redirect_logs


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ticketdesk", description="Support ticket client")
    parser.add_argument("--base-url", type=str, default=None, help="API base URL (overrides environment)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show INFO logs on stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    list_cmd = sub.add_parser("list", help="List tickets")
    list_cmd.add_argument("-q", "--query", type=str, default=None, help="Free-text filter")
    list_cmd.add_argument("--status", choices=[s.value for s in TicketStatus], default=None)

    show_cmd = sub.add_parser("show", help="Show a ticket and its comments")
    show_cmd.add_argument("ticket_id")

    create_cmd = sub.add_parser("create", help="Create a ticket")
    create_cmd.add_argument("--title", required=True)
    create_cmd.add_argument("--description", required=True)
    create_cmd.add_argument("--reporter", required=True)
    create_cmd.add_argument("--priority", choices=[p.value for p in Priority], default=None)

    status_cmd = sub.add_parser("status", help="Change ticket status")
    status_cmd.add_argument("ticket_id")
    status_cmd.add_argument("status", choices=[s.value for s in TicketStatus])

    comment_cmd = sub.add_parser("comment", help="Add a comment")
    comment_cmd.add_argument("ticket_id")
    comment_cmd.add_argument("--author", required=True)
    comment_cmd.add_argument("--body", required=True)

    delete_cmd = sub.add_parser("delete", help="Delete a ticket")
    delete_cmd.add_argument("ticket_id")

    return parser


def format_ticket(ticket: Ticket) -> str:
    return f"{ticket.id}  [{ticket.status.value}] [{ticket.priority.value}]  {ticket.title}  ({ticket.reporter})"


def format_comment(comment: Comment) -> str:
    return f"  {comment.created_at:%Y-%m-%d %H:%M} {comment.author}: {comment.body}"


def print_field_errors(errors: Dict[str, str]) -> None:
    for field, message in errors.items():
        print(f"  {field}: {message}", file=sys.stderr)


def _show(detail: TicketDetailController) -> int:
    if detail.state != ViewState.READY:
        print(detail.error, file=sys.stderr)
        return 1
    print(format_ticket(detail.ticket))
    print(detail.ticket.description)
    print(f"Comments ({len(detail.comments)})")
    for comment in detail.comments:
        print(format_comment(comment))
    return 0


async def run_command(args: argparse.Namespace, client: TicketDeskClient) -> int:
    """Execute one parsed sub-command, return the exit code"""
    alerts: List[str] = []

    if args.command == "list":
        listing = TicketListController(client)
        await listing.set_filters(text=args.query, status=args.status)
        await listing.mount()
        if listing.state != ViewState.READY:
            print(listing.error, file=sys.stderr)
            return 1
        for ticket in listing.tickets:
            print(format_ticket(ticket))
        print(f"Total: {listing.total}")
        return 0

    if args.command == "show":
        detail = TicketDetailController(client, args.ticket_id)
        await detail.mount()
        return _show(detail)

    if args.command == "create":
        navigated: List[str] = []
        form = TicketFormController(client, navigate=navigated.append)
        values = {
            "title": args.title,
            "description": args.description,
            "reporter": args.reporter,
        }
        if args.priority:
            values["priority"] = args.priority
        ticket = await form.submit(values)
        if ticket is None:
            if form.errors:
                print("Invalid ticket:", file=sys.stderr)
                print_field_errors(form.errors)
            else:
                print(form.submit_error, file=sys.stderr)
            return 1
        print(f"Created {format_ticket(ticket)}")
        print(navigated[-1])
        return 0

    if args.command in ("status", "comment"):
        detail = TicketDetailController(client, args.ticket_id, alert=alerts.append)
        await detail.mount()
        if detail.state != ViewState.READY:
            print(detail.error, file=sys.stderr)
            return 1

        if args.command == "status":
            if not await detail.change_status(args.status):
                print(alerts[-1], file=sys.stderr)
                return 1
            print(format_ticket(detail.ticket))
            return 0

        comment = await detail.submit_comment({"author": args.author, "body": args.body})
        if comment is None:
            if detail.comment_errors:
                print("Invalid comment:", file=sys.stderr)
                print_field_errors(detail.comment_errors)
            else:
                print(alerts[-1], file=sys.stderr)
            return 1
        print(format_comment(comment))
        return 0

    if args.command == "delete":
        try:
            await client.delete_ticket(args.ticket_id)
        except TicketDeskError as e:
            print(f"Failed to delete ticket: {e.message}", file=sys.stderr)
            return 1
        print(f"Deleted {args.ticket_id}")
        return 0

    return 2


async def _main(args: argparse.Namespace) -> int:
    config = ClientConfig.from_settings(get_settings(), base_url=args.base_url)
    async with TicketDeskClient(config) as client:
        return await run_command(args, client)


def main(argv: Optional[List[str]] = None) -> None:
    load_dotenv()
    args = build_parser().parse_args(argv)
    # stdout carries command output only
    redirect_logs(sys.stderr, "INFO" if args.verbose else "WARNING")
    try:
        code = asyncio.run(_main(args))
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    main()
