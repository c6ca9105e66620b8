"""FastAPI app factory.

Endpoints are intentionally thin wrappers over :class:`Sequencer` and the
outreach services; engine errors are mapped to HTTP status codes in one place.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from invitation_sequencer import __version__
from invitation_sequencer.errors import (
    DeliveryFailedError,
    DependenciesNotMetError,
    IllegalClassificationError,
    InvalidDependencyError,
    InvalidEventError,
    SequencingError,
    UnknownEventError,
    UnknownParticipantError,
)
from invitation_sequencer.sequencing.events import AutomationEvent
from invitation_sequencer.sequencing.participants import Participant
from invitation_sequencer.sequencing.queries import GroupProgress
from invitation_sequencer.sequencing.seed import PANELS, PHASES
from invitation_sequencer.sequencing.sequencer import Sequencer, TransitionResult
from invitation_sequencer.sequencing.services import Services, build_services
from invitation_sequencer.server.config import ServerSettings
from invitation_sequencer.server.models import (
    ApiParticipant,
    ApiProgress,
    ApproveRequest,
    ClassifyRequest,
    ClassifyTextRequest,
    DraftResponse,
    NewEventRequest,
    SendRequest,
    StatusChangeRequest,
    TransitionResponse,
)

logger = logging.getLogger(__name__)

_ERROR_STATUS: tuple[tuple[type[SequencingError], int], ...] = (
    (UnknownParticipantError, 404),
    (UnknownEventError, 404),
    (IllegalClassificationError, 422),
    (InvalidDependencyError, 422),
    (InvalidEventError, 422),
    (DependenciesNotMetError, 409),
    (DeliveryFailedError, 502),
)


def _status_for(error: SequencingError) -> int:
    for error_type, status in _ERROR_STATUS:
        if isinstance(error, error_type):
            return status
    return 400


def _to_api_participant(seq: Sequencer, p: Participant) -> ApiParticipant:
    return ApiParticipant(
        **p.model_dump(),
        deps_met=seq.deps_met(p.id),
        blocking=[d.id for d in seq.blocking_dependencies(p.id)],
    )


def _to_transition_response(seq: Sequencer, result: TransitionResult) -> TransitionResponse:
    return TransitionResponse(
        applied=result.applied,
        participant=_to_api_participant(seq, result.participant),
        events=list(result.events),
        unlocked=[p.id for p in result.unlocked],
    )


def _to_api_progress(g: GroupProgress) -> ApiProgress:
    if g.key == "phase":
        phase = PHASES.get(int(g.value))
        label = phase.label if phase else f"Phase {g.value}"
    else:
        panel = PANELS.get(g.value)
        label = panel.subtitle if panel else f"Panel {g.value}"
    return ApiProgress.model_validate({**g.to_json(), "label": label})


def create_app(sequencer: Sequencer | None = None) -> FastAPI:
    settings = ServerSettings()
    services: Services = build_services(settings, sequencer)
    seq = services.sequencer

    app = FastAPI(
        title="Invitation Sequencer",
        version=__version__,
        description="REST API over the dependency-gated invitation sequencing engine.",
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.state.settings = settings
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.parsed_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(SequencingError)
    async def handle_sequencing_error(_request: Request, exc: SequencingError) -> JSONResponse:
        status = _status_for(exc)
        logger.info("Request rejected", extra={"status": status, "error": str(exc)})
        return JSONResponse(status_code=status, content={"detail": str(exc)})

    @app.get("/api/health")
    def health() -> dict[str, object]:
        return {"status": "ok", "version": __version__, "revision": seq.revision}

    @app.get("/api/participants", response_model=list[ApiParticipant])
    def list_participants(phase: int | None = None) -> list[ApiParticipant]:
        members = seq.participants() if phase is None else seq.participants_by_phase(phase)
        return [_to_api_participant(seq, p) for p in members]

    @app.get("/api/participants/{participant_id}", response_model=ApiParticipant)
    def get_participant(participant_id: str) -> ApiParticipant:
        return _to_api_participant(seq, seq.get_participant(participant_id))

    @app.post("/api/participants/{participant_id}/status", response_model=TransitionResponse)
    def set_status(participant_id: str, req: StatusChangeRequest) -> TransitionResponse:
        result = seq.set_status(participant_id, req.status, description=req.description)
        return _to_transition_response(seq, result)

    @app.post("/api/participants/{participant_id}/classify", response_model=TransitionResponse)
    def classify(participant_id: str, req: ClassifyRequest) -> TransitionResponse:
        result = seq.classify_response(participant_id, req.classification, req.snippet)
        return _to_transition_response(seq, result)

    @app.post(
        "/api/participants/{participant_id}/classify-text", response_model=TransitionResponse
    )
    def classify_text(participant_id: str, req: ClassifyTextRequest) -> TransitionResponse:
        participant = seq.get_participant(participant_id)
        verdict = services.classifier.classify(req.body, participant.name)
        result = seq.classify_response(participant_id, verdict.classification, req.body[:200])
        return _to_transition_response(seq, result)

    @app.post("/api/participants/{participant_id}/draft", response_model=DraftResponse)
    def generate_draft(participant_id: str) -> DraftResponse:
        draft, result = services.outreach.generate_draft(participant_id)
        return DraftResponse(
            subject=draft.subject,
            body=draft.body,
            result=_to_transition_response(seq, result),
        )

    @app.post("/api/participants/{participant_id}/approve", response_model=TransitionResponse)
    def approve_draft(participant_id: str, req: ApproveRequest) -> TransitionResponse:
        result = services.outreach.approve_draft(participant_id, req.body)
        return _to_transition_response(seq, result)

    @app.post("/api/participants/{participant_id}/send", response_model=TransitionResponse)
    def send(participant_id: str, req: SendRequest) -> TransitionResponse:
        result = services.outreach.send(
            participant_id, req.to, subject=req.subject, body=req.body
        )
        return _to_transition_response(seq, result)

    @app.get("/api/events", response_model=list[AutomationEvent])
    def list_events(participant_id: str | None = None) -> list[AutomationEvent]:
        return seq.events(participant_id)

    @app.get("/api/events/pending", response_model=list[AutomationEvent])
    def pending_events() -> list[AutomationEvent]:
        return seq.get_pending_actions()

    @app.get("/api/events/{event_id}", response_model=AutomationEvent)
    def get_event(event_id: str) -> AutomationEvent:
        return seq.get_event(event_id)

    @app.post("/api/events/{event_id}/dismiss", response_model=AutomationEvent)
    def dismiss_event(event_id: str) -> AutomationEvent:
        return seq.dismiss_event(event_id)

    @app.post("/api/events", response_model=AutomationEvent, status_code=201)
    def add_event(req: NewEventRequest) -> AutomationEvent:
        try:
            return seq.add_event(
                req.kind,
                req.participant_id,
                description=req.description,
                requires_action=req.requires_action,
                action_label=req.action_label,
                **{k: v for k, v in req.details.items() if k not in NewEventRequest.model_fields},
            )
        except PydanticValidationError as e:
            raise HTTPException(status_code=422, detail=str(e)) from e

    @app.get("/api/progress/phases", response_model=list[ApiProgress])
    def phase_progress() -> list[ApiProgress]:
        return [_to_api_progress(g) for g in seq.progress_by("phase")]

    @app.get("/api/progress/panels", response_model=list[ApiProgress])
    def panel_progress() -> list[ApiProgress]:
        return [_to_api_progress(g) for g in seq.progress_by("panel")]

    @app.get("/api/confirmed-names")
    def confirmed_names() -> list[str]:
        return seq.confirmed_names()

    @app.get("/api/unlocked", response_model=list[ApiParticipant])
    def unlocked() -> list[ApiParticipant]:
        return [_to_api_participant(seq, p) for p in seq.unlocked_participants()]

    return app
