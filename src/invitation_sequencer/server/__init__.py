"""FastAPI server adapter for invitation-sequencer.

Design intent:
- Keep business logic in `invitation_sequencer.sequencing.*`
- Keep server-specific concerns (routing, CORS, error mapping) here
"""

from __future__ import annotations

__all__ = ["create_app"]

from invitation_sequencer.server.app import create_app
