"""CLI entrypoint for the invitation sequencer.

Every command loads the persisted state (or the seed roster on first run),
applies at most one operation, and exits. Mutations are saved before the
command returns.
"""

from __future__ import annotations

import argparse
import logging
import sys

from pydantic import ValidationError

from invitation_sequencer import __version__
from invitation_sequencer.errors import SequencingError
from invitation_sequencer.sequencing.config import SequencerSettings
from invitation_sequencer.sequencing.events import AutomationEvent
from invitation_sequencer.sequencing.logging import configure_logging
from invitation_sequencer.sequencing.participants import Participant
from invitation_sequencer.sequencing.services import Services, build_services
from invitation_sequencer.sequencing.state_machine import (
    InvitationStatus,
    ResponseClassification,
    status_label,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sequencer",
        description="Dependency-gated invitation sequencing",
    )
    parser.add_argument(
        "--version", action="version", version=f"invitation-sequencer {__version__}"
    )
    parser.add_argument(
        "--log-format",
        choices=["json", "text"],
        default="text",
        help="Log output format (default: text)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    list_cmd = subparsers.add_parser("list", help="List participants with status and unlock state")
    list_cmd.add_argument("--phase", type=int, default=None, help="Only show one phase")

    show = subparsers.add_parser("show", help="Show one participant")
    show.add_argument("participant_id")

    set_status = subparsers.add_parser(
        "set-status",
        help="Manually set a participant's status (never unlocks dependents)",
    )
    set_status.add_argument("participant_id")
    set_status.add_argument("status", choices=[s.value for s in InvitationStatus])

    classify = subparsers.add_parser(
        "classify", help="Record a classified response (confirmations unlock dependents)"
    )
    classify.add_argument("participant_id")
    classify.add_argument("classification", choices=[c.value for c in ResponseClassification])
    classify.add_argument("--snippet", default="", help="Short excerpt of the response")

    classify_text = subparsers.add_parser(
        "classify-text", help="Classify a response body and apply the result"
    )
    classify_text.add_argument("participant_id")
    classify_text.add_argument("--body", required=True, help="Full response text")

    events = subparsers.add_parser("events", help="List automation events")
    events.add_argument("--pending", action="store_true", help="Only events requiring action")
    events.add_argument("--participant", default=None, help="Only events for one participant")

    dismiss = subparsers.add_parser("dismiss", help="Dismiss a pending action (record is kept)")
    dismiss.add_argument("event_id")

    progress = subparsers.add_parser("progress", help="Show progress per phase or panel")
    progress.add_argument("--by", choices=["phase", "panel"], default="phase")

    draft = subparsers.add_parser("draft", help="Generate an invitation or follow-up draft")
    draft.add_argument("participant_id")

    approve = subparsers.add_parser("approve", help="Approve the current draft")
    approve.add_argument("participant_id")

    send = subparsers.add_parser("send", help="Deliver the approved draft")
    send.add_argument("participant_id")
    send.add_argument("--to", default=None, help="Recipient address (defaults to stored email)")

    subparsers.add_parser("scan", help="Scan the inbox for replies from invited participants")
    subparsers.add_parser("reset", help="Reseed the roster and clear the event log")

    return parser


def _format_participant(services: Services, p: Participant) -> str:
    marker = "unlocked" if services.sequencer.deps_met(p.id) else "blocked"
    return f"{p.phase_order:<4} {p.id:<22} {status_label(p.status):<16} {marker:<9} {p.name}"


def _format_event(e: AutomationEvent) -> str:
    flag = "*" if e.requires_action else " "
    label = f" [{e.action_label}]" if e.requires_action and e.action_label else ""
    return f"{flag} {e.id} {e.timestamp:%Y-%m-%d %H:%M} {e.kind:<20} {e.description}{label}"


def _run(args: argparse.Namespace, services: Services) -> int:
    seq = services.sequencer

    if args.command == "list":
        if args.phase is None:
            members = seq.participants()
        else:
            members = seq.participants_by_phase(args.phase)
        for p in members:
            print(_format_participant(services, p))
        return 0

    if args.command == "show":
        p = seq.get_participant(args.participant_id)
        print(f"{p.name} ({p.organization})")
        print(f"  status:       {status_label(p.status)}")
        print(f"  phase/panel:  {p.phase} / {p.panel}")
        deps = ", ".join(p.dependencies) or "none"
        print(f"  dependencies: {deps} (met: {seq.deps_met(p.id)})")
        if p.last_response_classification is not None:
            print(
                f"  last reply:   {p.last_response_classification.value}: "
                f"{p.last_response_snippet or ''}"
            )
        return 0

    if args.command == "set-status":
        result = seq.set_status(args.participant_id, args.status)
        print(f"{result.participant.name}: {status_label(result.participant.status)}")
        return 0

    if args.command == "classify":
        result = seq.classify_response(args.participant_id, args.classification, args.snippet)
        if not result.applied:
            print("Unclear response: no change")
            return 0
        print(f"{result.participant.name}: {status_label(result.participant.status)}")
        for unlocked in result.unlocked:
            print(f"Unlocked: {unlocked.name}")
        return 0

    if args.command == "classify-text":
        participant = seq.get_participant(args.participant_id)
        verdict = services.classifier.classify(args.body, participant.name)
        print(f"Classified as {verdict.classification.value} ({verdict.confidence:.2f})")
        result = seq.classify_response(participant.id, verdict.classification, args.body[:200])
        for unlocked in result.unlocked:
            print(f"Unlocked: {unlocked.name}")
        return 0

    if args.command == "events":
        if args.pending:
            listed = seq.get_pending_actions()
            if args.participant:
                listed = [e for e in listed if e.participant_id == args.participant]
        else:
            listed = seq.events(args.participant)
        for e in listed:
            print(_format_event(e))
        return 0

    if args.command == "dismiss":
        event = seq.dismiss_event(args.event_id)
        print(f"Dismissed {event.id}")
        return 0

    if args.command == "progress":
        for g in seq.progress_by(args.by):
            print(
                f"{args.by} {g.value:<4} {g.confirmed}/{g.total} confirmed ({g.fill_percent}%), "
                f"{g.sent} sent, {g.declined} declined"
            )
        return 0

    if args.command == "draft":
        draft, _ = services.outreach.generate_draft(args.participant_id)
        print(f"Subject: {draft.subject}\n\n{draft.body}")
        return 0

    if args.command == "approve":
        result = services.outreach.approve_draft(args.participant_id)
        print(f"{result.participant.name}: {status_label(result.participant.status)}")
        return 0

    if args.command == "send":
        result = services.outreach.send(args.participant_id, args.to)
        print(f"{result.participant.name}: {status_label(result.participant.status)}")
        return 0

    if args.command == "scan":
        report = services.scanner.scan()
        for outcome in report.outcomes:
            detail = outcome.error or (
                outcome.classification.value if outcome.classification else ""
            )
            print(f"{outcome.participant_id:<22} {outcome.kind.value:<12} {detail}")
        print(f"Found {report.found} response(s), {len(report.failures)} failure(s)")
        return 0

    if args.command == "reset":
        seq.reset()
        print("State reset to seed roster")
        return 0

    logger.error("Unknown command", extra={"command": args.command})
    return 2


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = SequencerSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level, fmt=args.log_format)

    try:
        services = build_services(settings)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    try:
        return _run(args, services)

    except SequencingError as e:
        logger.warning(str(e), extra={"command": args.command})
        print(str(e), file=sys.stderr)
        return 3

    except Exception:
        logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
