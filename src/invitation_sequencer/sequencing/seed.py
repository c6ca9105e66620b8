"""Default seed roster for the CERA Week 2026 invitation cascade.

Participants are created once from this roster; the dependency edges encode
who must confirm before each invitation may go out.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from invitation_sequencer.sequencing.participants import Participant, utc_now


@dataclass(frozen=True, slots=True)
class PhaseInfo:
    number: int
    label: str
    description: str
    timeline: str


@dataclass(frozen=True, slots=True)
class PanelInfo:
    id: str
    title: str
    subtitle: str
    context: str


PHASES: dict[int, PhaseInfo] = {
    0: PhaseInfo(
        0, "Jamie Approval", "Present complete package to Jamie for approval", "Feb 10-14"
    ),
    1: PhaseInfo(
        1,
        "Anchors",
        "Lock 4-5 names whose presence makes every subsequent invitation a yes",
        "Weeks 1-2",
    ),
    2: PhaseInfo(
        2,
        "Demand Signal",
        "Use anchor names to pull in hyperscalers, data center operators, and grid operators",
        "Weeks 2-3",
    ),
    3: PhaseInfo(
        3,
        "Civic + Infrastructure + International",
        "Fill Panels 3, 2.5, and 4 with the speakers who make the Watershed seed inevitable",
        "Weeks 3-4",
    ),
    4: PhaseInfo(
        4, "Final Seats + Alternates", "Fill remaining seats and confirm alternates", "Weeks 4-5"
    ),
}

PANELS: dict[str, PanelInfo] = {
    "1": PanelInfo(
        "1",
        "Panel 1",
        "State Policy & the NASEO Accelerator",
        "State Policy Scaffolding: 13-state Geothermal Accelerator, NASEO co-convening, "
        "state energy directors.",
    ),
    "2": PanelInfo(
        "2",
        "Panel 2",
        "Demand Signal: Hyperscalers & Grid",
        "Demand Signal + Deployment: Hyperscaler energy procurement, Fervo commercial PPA, "
        "Blackstone infrastructure.",
    ),
    "2.5": PanelInfo(
        "2.5",
        "Panel 2.5",
        "Infrastructure: Compute, Power & Fiber",
        "Infrastructure Routing: Behind-the-meter power, fiber connectivity, "
        "Crusoe/Lancium/Zayo.",
    ),
    "3": PanelInfo(
        "3",
        "Panel 3",
        "Civic Frameworks & Community Benefit",
        "Community Siting Standard: $50B in rejected data center projects, Lancaster CBA, "
        "Marana ordinance-first, Hermiston ChangeX.",
    ),
    "4": PanelInfo(
        "4",
        "Panel 4",
        "International & Design Innovation",
        "Design + International Proof: Iceland/NZ geothermal data centers, Snøhetta thermal "
        "commons, Corgan commercial-scale.",
    ),
    "5": PanelInfo(
        "5",
        "Panel 5",
        "Capital, Grid & Equity (Closing)",
        "Capital + Grid + Equity: Arnold Ventures, ERCOT, PJM, HEET networked geothermal, "
        "tribal sovereignty, Emerson.",
    ),
}


def panel_context(panel: str) -> str:
    info = PANELS.get(panel)
    if info is None:
        return f"Panel {panel}"
    return f"{info.title}: {info.context}"


_ROSTER: list[dict[str, object]] = [
    # Phase 1: anchors
    {
        "id": "inv-terry",
        "name": "David Terry",
        "organization": "NASEO",
        "title": "President",
        "panel": "1",
        "panel_role": "moderator",
        "phase": 1,
        "phase_order": "1A",
        "invited_by": "trent",
        "confidence": "HIGH",
        "leverage_script": (
            "NASEO's Geothermal Accelerator is the most significant state-level coordination "
            "on geothermal in a decade. CERA Week is the right venue to show the energy "
            "establishment that 13 states are already aligned. We'd like NASEO to co-convene "
            "a series of panels. You'd moderate the opening panel with your Accelerator state "
            "directors."
        ),
        "dependencies": [],
        "notes": "Direct relationship. NASEO co-hosting advances Accelerator visibility.",
    },
    {
        "id": "inv-latimer",
        "name": "Tim Latimer",
        "organization": "Fervo Energy",
        "title": "CEO",
        "panel": "2",
        "panel_role": "speaker",
        "phase": 1,
        "phase_order": "1B",
        "invited_by": "jamie",
        "confidence": "HIGH",
        "leverage_script": (
            "NASEO is co-convening. We're building six panels at CERA Week connecting state "
            "geothermal policy to hyperscaler demand. Your Pact is going to be presented as "
            "the industry standard. We need you on the demand panel."
        ),
        "dependencies": ["inv-terry"],
        "notes": "Jamie's ecosystem. InnerSpace and Fervo share research investment history.",
    },
    {
        "id": "inv-arnold",
        "name": "John Arnold",
        "organization": "Arnold Ventures",
        "title": "Founder",
        "panel": "5",
        "panel_role": "moderator",
        "phase": 1,
        "phase_order": "1C",
        "invited_by": "jamie",
        "confidence": "JAMIE ONLY",
        "leverage_script": (
            "We're organizing a closed-door series at CERA Week on geothermal, AI "
            "infrastructure, and grid modernization. The room will include ERCOT, PJM, 13 "
            "state energy directors, and hyperscaler energy teams from Google and Microsoft. "
            "We'd like you to moderate the closing conversation on capital, grid, and "
            "distributional equity."
        ),
        "dependencies": [],
        "notes": (
            "CRITICAL anchor. Do not invite anyone for Panel 5 until Arnold confirms. "
            "Single point of failure."
        ),
    },
    {
        "id": "inv-lesofski",
        "name": "Emy Lesofski",
        "organization": "Utah Office of Energy Development",
        "title": "Director",
        "panel": "1",
        "panel_role": "speaker",
        "phase": 1,
        "phase_order": "1D",
        "invited_by": "trent",
        "confidence": "HIGH",
        "leverage_script": (
            "David Terry is co-convening the CERA Week geothermal series through NASEO. Utah "
            "is the anchor state: FORGE, Fervo, and the data center proposals in Millard "
            "County make Utah the proof point. We'd like you on the opening policy panel."
        ),
        "dependencies": ["inv-terry"],
        "notes": "Utah energy circles. She's publicly championed FORGE + Fervo.",
    },
    {
        "id": "inv-turnerlee",
        "name": "Nicol Turner Lee",
        "organization": "Brookings Institution",
        "title": "Senior Fellow",
        "panel": "3",
        "panel_role": "moderator",
        "phase": 1,
        "phase_order": "1E",
        "invited_by": "jamie",
        "confidence": "MEDIUM",
        "leverage_script": (
            "Your January 2026 report on data center CBAs is the most authoritative analysis "
            "in the field. Would you present your findings and moderate a panel at CERA Week? "
            "The panel includes the mayors of Lancaster, Marana, and the city manager from "
            "Hermiston, the three municipalities that built the models your report recommends."
        ),
        "dependencies": [],
        "notes": "Policy world. Jamie's DC network.",
    },
    {
        "id": "inv-powers",
        "name": "Cassie Powers",
        "organization": "NASEO",
        "title": "Sr. Managing Director",
        "panel": "1",
        "panel_role": "speaker",
        "phase": 1,
        "phase_order": "1A2",
        "invited_by": "trent",
        "confidence": "HIGH",
        "dependencies": ["inv-terry"],
        "notes": "Comes with Terry. Operational lead for the Accelerator.",
    },
    # Phase 2: demand signal
    {
        "id": "inv-corio",
        "name": "Amanda Peterson Corio",
        "organization": "Google",
        "title": "Data Center Energy Lead",
        "panel": "2",
        "panel_role": "speaker",
        "phase": 2,
        "phase_order": "2A",
        "invited_by": "jamie",
        "confidence": "MEDIUM-HIGH",
        "leverage_names": ["Tim Latimer", "David Terry", "John Arnold"],
        "dependencies": ["inv-latimer", "inv-terry", "inv-arnold"],
        "notes": "Through Fervo-Google PPA relationship. Latimer confirmation is the bridge.",
    },
    {
        "id": "inv-hollis",
        "name": "Bobby Hollis",
        "organization": "Microsoft",
        "title": "VP Energy",
        "panel": "2",
        "panel_role": "speaker",
        "phase": 2,
        "phase_order": "2B",
        "invited_by": "jamie",
        "confidence": "MEDIUM",
        "leverage_names": ["Amanda Peterson Corio", "Tim Latimer"],
        "dependencies": ["inv-corio"],
        "notes": "Google's energy lead confirmed creates competitive pull.",
    },
    {
        "id": "inv-herlihy",
        "name": "Brian Herlihy",
        "organization": "QTS (Blackstone)",
        "title": "Chief Energy Strategy Officer",
        "panel": "2",
        "panel_role": "moderator",
        "phase": 2,
        "phase_order": "2C",
        "invited_by": "jamie",
        "confidence": "MEDIUM-HIGH",
        "leverage_names": ["Sean Klimczak"],
        "dependencies": ["inv-latimer"],
        "notes": "QTS/Blackstone ecosystem.",
    },
    {
        "id": "inv-klimczak",
        "name": "Sean Klimczak",
        "organization": "Blackstone Infrastructure",
        "title": "Global Head",
        "panel": "2",
        "panel_role": "speaker",
        "phase": 2,
        "phase_order": "2D",
        "invited_by": "jamie",
        "confidence": "MEDIUM",
        "leverage_names": ["John Arnold", "Tim Latimer"],
        "dependencies": ["inv-arnold", "inv-latimer"],
        "notes": "Blackstone owns QTS. Arnold connection is the bridge.",
    },
    {
        "id": "inv-vegas",
        "name": "Pablo Vegas",
        "organization": "ERCOT",
        "title": "CEO",
        "panel": "5",
        "panel_role": "speaker",
        "phase": 2,
        "phase_order": "2E",
        "invited_by": "jamie",
        "confidence": "MEDIUM",
        "leverage_names": ["John Arnold"],
        "dependencies": ["inv-arnold"],
        "notes": "Houston-based. CERA Week is home turf. Arnold confirmation pulls him in.",
    },
    # Phase 3: civic + infrastructure + international
    {
        "id": "inv-sorace",
        "name": "Danene Sorace",
        "organization": "City of Lancaster, PA",
        "title": "Mayor",
        "panel": "3",
        "panel_role": "speaker",
        "phase": 3,
        "phase_order": "3A",
        "invited_by": "jamie",
        "confidence": "MEDIUM",
        "leverage_names": ["Nicol Turner Lee"],
        "dependencies": ["inv-turnerlee"],
        "notes": "$20M CBA is the national reference case.",
    },
    {
        "id": "inv-post",
        "name": "Jon Post",
        "organization": "City of Marana, AZ",
        "title": "Mayor",
        "panel": "3",
        "panel_role": "speaker",
        "phase": 3,
        "phase_order": "3B",
        "invited_by": "trent",
        "confidence": "MEDIUM",
        "leverage_names": ["Nicol Turner Lee", "Danene Sorace"],
        "dependencies": ["inv-turnerlee"],
        "notes": "Ordinance-first model is the standard. NASEO Accelerator includes Arizona.",
    },
    {
        "id": "inv-morgan",
        "name": "Mark Morgan",
        "organization": "City of Hermiston, OR",
        "title": "City Manager",
        "panel": "3",
        "panel_role": "speaker",
        "phase": 3,
        "phase_order": "3C",
        "invited_by": "jamie",
        "confidence": "MEDIUM",
        "leverage_names": ["Nicol Turner Lee"],
        "dependencies": ["inv-turnerlee"],
        "notes": "ChangeX model and water agreement proof point.",
    },
    {
        "id": "inv-jewett",
        "name": "Sarah Jewett",
        "organization": "Fervo Energy",
        "title": "VP Strategy",
        "panel": "3",
        "panel_role": "speaker",
        "phase": 3,
        "phase_order": "3D",
        "invited_by": "jamie",
        "confidence": "HIGH",
        "dependencies": ["inv-latimer"],
        "notes": "Comes with Latimer confirmation. Pact presentation.",
    },
    {
        "id": "inv-lochmiller",
        "name": "Chase Lochmiller",
        "organization": "Crusoe Energy",
        "title": "CEO",
        "panel": "2.5",
        "panel_role": "speaker",
        "phase": 3,
        "phase_order": "3E",
        "invited_by": "drew",
        "confidence": "MEDIUM",
        "leverage_names": ["Michael McNamara", "Bill Long"],
        "dependencies": [],
        "notes": "1.2GW campus, 350MW on-site power. $10B+ valuation.",
    },
    {
        "id": "inv-mcnamara",
        "name": "Michael McNamara",
        "organization": "Lancium",
        "title": "CEO",
        "panel": "2.5",
        "panel_role": "speaker",
        "phase": 3,
        "phase_order": "3F",
        "invited_by": "drew",
        "confidence": "MEDIUM-HIGH",
        "leverage_names": ["Chase Lochmiller"],
        "dependencies": ["inv-lochmiller"],
        "notes": "Woodlands, TX-based. Mitchell Foundation bridge.",
    },
    {
        "id": "inv-long",
        "name": "Bill Long",
        "organization": "Zayo Group",
        "title": "CPO & CSO",
        "panel": "2.5",
        "panel_role": "moderator",
        "phase": 3,
        "phase_order": "3G",
        "invited_by": "jamie",
        "confidence": "MEDIUM",
        "leverage_names": ["Chase Lochmiller", "Michael McNamara"],
        "dependencies": ["inv-lochmiller", "inv-mcnamara"],
        "notes": "220,000+ route miles. Building 5,000 new for AI/data center.",
    },
    {
        "id": "inv-kristinsson",
        "name": "Eyjólfur Kristinsson",
        "organization": "atNorth",
        "title": "CEO",
        "panel": "4",
        "panel_role": "speaker",
        "phase": 3,
        "phase_order": "3H",
        "invited_by": "jamie",
        "confidence": "MEDIUM",
        "dependencies": [],
        "notes": "Iceland geothermal-AI model.",
    },
    {
        "id": "inv-ward",
        "name": "Dominic Ward",
        "organization": "Verne",
        "title": "CEO",
        "panel": "4",
        "panel_role": "speaker",
        "phase": 3,
        "phase_order": "3I",
        "invited_by": "jamie",
        "confidence": "MEDIUM",
        "dependencies": ["inv-kristinsson"],
        "notes": "Iceland ecosystem. Comes with atNorth invitation.",
    },
    {
        "id": "inv-seed",
        "name": "Chris Seed",
        "organization": "NZ Ambassador to the US",
        "title": "Ambassador",
        "panel": "4",
        "panel_role": "speaker",
        "phase": 3,
        "phase_order": "3J",
        "invited_by": "jamie",
        "confidence": "LOW-MEDIUM",
        "leverage_names": ["Mike Fuge"],
        "dependencies": [],
        "notes": "Diplomatic channel. Mike Fuge (Contact Energy) may bridge.",
    },
    # Phase 4: final seats + alternates
    {
        "id": "inv-mills",
        "name": "David E. Mills",
        "organization": "PJM Interconnection",
        "title": "Interim CEO",
        "panel": "5",
        "panel_role": "speaker",
        "phase": 4,
        "phase_order": "4A",
        "invited_by": "jamie",
        "confidence": "LOW-MEDIUM",
        "leverage_names": ["John Arnold"],
        "dependencies": ["inv-arnold"],
        "notes": "Arnold's confirmation pulls grid operators.",
    },
    {
        "id": "inv-noel",
        "name": "Donna Marie Noel",
        "organization": "Pyramid Lake Paiute Tribe",
        "title": "Energy Director",
        "panel": "5",
        "panel_role": "speaker",
        "phase": 4,
        "phase_order": "4B",
        "invited_by": "jamie",
        "confidence": "MEDIUM",
        "dependencies": [],
        "notes": "DOE geothermal ecosystem. InnerSpace connection.",
    },
    {
        "id": "inv-magavi",
        "name": "Zeyneb Magavi",
        "organization": "HEET",
        "title": "Co-Executive Director",
        "panel": "5",
        "panel_role": "speaker",
        "phase": 4,
        "phase_order": "4C",
        "invited_by": "jamie",
        "confidence": "HIGH",
        "dependencies": [],
        "notes": "Known entity in geothermal ecosystem. Jamie likely direct.",
    },
    {
        "id": "inv-karsanbhai",
        "name": "Lal Karsanbhai",
        "organization": "Emerson Electric",
        "title": "CEO",
        "panel": "5",
        "panel_role": "speaker",
        "phase": 4,
        "phase_order": "4D",
        "invited_by": "drew",
        "confidence": "MEDIUM",
        "leverage_names": ["John Arnold"],
        "dependencies": ["inv-arnold"],
        "notes": "Houston-based Fortune 500. Ovation Green platform powers geothermal plants.",
    },
    {
        "id": "inv-clark",
        "name": "Gabe Clark",
        "organization": "Corgan",
        "title": "Principal",
        "panel": "4",
        "panel_role": "speaker",
        "phase": 4,
        "phase_order": "4E",
        "invited_by": "jamie",
        "confidence": "MEDIUM",
        "dependencies": [],
        "notes": "#1 data center architecture firm. Commercial-scale cost perspective.",
    },
    {
        "id": "inv-thorsen",
        "name": "Kjetil Thorsen",
        "organization": "Snøhetta",
        "title": "Founding Partner",
        "panel": "4",
        "panel_role": "speaker",
        "phase": 4,
        "phase_order": "4F",
        "invited_by": "jamie",
        "confidence": "LOW-MEDIUM",
        "dependencies": [],
        "notes": '"The Spark" concept. Nordic architecture network.',
    },
    {
        "id": "inv-ingels",
        "name": "Bjarke Ingels",
        "organization": "BIG",
        "title": "Founder & Creative Director",
        "panel": "4",
        "panel_role": "keynote",
        "phase": 4,
        "phase_order": "4G",
        "invited_by": "jamie",
        "confidence": "LOW-MEDIUM",
        "dependencies": [],
        "notes": "Keynote conversation, not panel moderator.",
    },
]


def seed_participants(now: datetime | None = None) -> list[Participant]:
    """Build fresh participant records from the default roster."""

    stamp = now or utc_now()
    return [
        Participant.model_validate({**row, "created_at": stamp, "updated_at": stamp})
        for row in _ROSTER
    ]
