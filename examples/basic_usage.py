#!/usr/bin/env python3
"""Programmatic sequencing example.

This drives the engine directly instead of through the CLI:

* load settings from `.env`
* confirm an anchor participant and print who it unlocked
* draft, approve and queue an invitation for one unlocked participant

State is persisted to the configured `SEQUENCER_STATE_PATH`.
"""

from __future__ import annotations

import argparse
from typing import Sequence

from invitation_sequencer.errors import SequencingError
from invitation_sequencer.sequencing.config import SequencerSettings
from invitation_sequencer.sequencing.logging import configure_logging
from invitation_sequencer.sequencing.services import build_services


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Confirm a participant and invite the next one.")
    parser.add_argument("--confirm", default="inv-terry", help="Participant that confirmed")
    parser.add_argument("--invite", default="inv-latimer", help="Participant to invite next")
    parser.add_argument("--to", required=True, help="Recipient address for the invitation")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = SequencerSettings()
    configure_logging(settings.log_level, fmt="text")
    services = build_services(settings)
    seq = services.sequencer

    result = seq.classify_response(args.confirm, "confirmed", "Confirmed by phone")
    print(f"{result.participant.name} confirmed")
    for unlocked in result.unlocked:
        print(f"  unlocked: {unlocked.name}")

    try:
        draft, _ = services.outreach.generate_draft(args.invite)
        services.outreach.approve_draft(args.invite)
        services.outreach.send(args.invite, args.to)
    except SequencingError as exc:
        print(str(exc))
        return 1

    print(f"Queued: {draft.subject}")
    print(f"Outbox: {settings.outbox_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
