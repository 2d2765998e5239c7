"""Template catalog - decomposition skeletons for each task archetype.

Each template owns its trigger keywords and an ordered skeleton of step
blueprints. Durations are either a constant or a table keyed by complexity
tier; a tier missing from a table resolves to the nearest defined tier.
Dependencies name earlier steps by 1-based skeleton index, which keeps
every instantiated graph acyclic.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from taskgraph.decomposition.models import Archetype, ComplexityTier

C = ComplexityTier

DurationSpec = int | Mapping[ComplexityTier, int]


def resolve_duration(duration: DurationSpec, tier: ComplexityTier) -> int:
    """
    Resolve a step duration for a complexity tier.

    Args:
        duration: Constant minutes or a tier -> minutes table.
        tier: Complexity tier being built.

    Returns:
        Minutes for the tier. Unlisted tiers take the value of the nearest
        listed tier by severity; ties go to the more severe tier.

    Example:
        >>> resolve_duration({C.MODERATE: 90, C.COMPLEX: 180}, C.SIMPLE)
        90
    """
    if isinstance(duration, int):
        return duration

    if tier in duration:
        return duration[tier]

    nearest = min(
        duration,
        key=lambda defined: (abs(defined.severity - tier.severity), -defined.severity),
    )
    return duration[nearest]


@dataclass(frozen=True)
class StepBlueprint:
    """One skeleton entry before ID and duration instantiation."""

    title: str
    description: str
    duration: DurationSpec
    depends_on: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        if isinstance(self.duration, int):
            if self.duration <= 0:
                raise ValueError(f"Step '{self.title}' has non-positive duration")
            return
        if not self.duration:
            raise ValueError(f"Step '{self.title}' has an empty duration table")
        if any(minutes <= 0 for minutes in self.duration.values()):
            raise ValueError(f"Step '{self.title}' has non-positive duration")
        object.__setattr__(self, "duration", MappingProxyType(dict(self.duration)))


@dataclass(frozen=True)
class TaskTemplate:
    """
    Decomposition template for one archetype.

    Attributes:
        archetype: Archetype this template implements.
        id_prefix: Prefix for generated subtask IDs (``{prefix}-{index}``).
        triggers: Lowercase keywords that select this template.
        steps: Ordered skeleton.
        simple_core: Number of leading steps kept for simple tasks, or
            None to always emit the full skeleton.
    """

    archetype: Archetype
    id_prefix: str
    triggers: tuple[str, ...]
    steps: tuple[StepBlueprint, ...]
    simple_core: int | None = None

    def __post_init__(self) -> None:
        if not self.steps:
            raise ValueError(f"Template {self.archetype.value} has no steps")
        for index, step in enumerate(self.steps, start=1):
            for dep in step.depends_on:
                if not 1 <= dep < index:
                    raise ValueError(
                        f"Template {self.archetype.value} step {index} depends on "
                        f"step {dep}, which is not an earlier step"
                    )
        if self.simple_core is not None and not 1 <= self.simple_core <= len(self.steps):
            raise ValueError(f"Template {self.archetype.value} has invalid simple_core")

    def steps_for(self, tier: ComplexityTier) -> tuple[StepBlueprint, ...]:
        """Get the skeleton steps emitted for a complexity tier."""
        if tier is ComplexityTier.SIMPLE and self.simple_core is not None:
            return self.steps[: self.simple_core]
        return self.steps

    def subtask_id(self, index: int) -> str:
        """Get the subtask ID for a 1-based skeleton index."""
        return f"{self.id_prefix}-{index}"


# =============================================================================
# CATALOG
# =============================================================================


WEB_PROJECT = TaskTemplate(
    archetype=Archetype.WEB_PROJECT,
    id_prefix="web",
    triggers=("website", "web app", "landing page"),
    simple_core=4,
    steps=(
        StepBlueprint(
            "Research & Planning",
            "Define requirements, create wireframes, plan architecture",
            {C.MODERATE: 60, C.COMPLEX: 90, C.VERY_COMPLEX: 120},
        ),
        StepBlueprint(
            "Design Phase",
            "Create mockups, design system, color palette, typography",
            {C.MODERATE: 90, C.COMPLEX: 120, C.VERY_COMPLEX: 180},
            (1,),
        ),
        StepBlueprint(
            "Setup Development Environment",
            "Initialize project, setup dependencies, configure tools",
            30,
            (2,),
        ),
        StepBlueprint(
            "Build Core Structure",
            "Create layout, navigation, routing, basic components",
            {C.MODERATE: 120, C.COMPLEX: 180, C.VERY_COMPLEX: 240},
            (3,),
        ),
        StepBlueprint(
            "Implement Features",
            "Add functionality, forms, interactions, API integration",
            {C.MODERATE: 180, C.COMPLEX: 240, C.VERY_COMPLEX: 360},
            (4,),
        ),
        StepBlueprint(
            "Testing & Debugging",
            "Test all features, fix bugs, cross-browser testing",
            {C.MODERATE: 90, C.COMPLEX: 120, C.VERY_COMPLEX: 180},
            (5,),
        ),
        StepBlueprint(
            "Polish & Optimize",
            "Performance optimization, final design tweaks, SEO",
            90,
            (6,),
        ),
        StepBlueprint(
            "Deploy & Launch",
            "Deploy to hosting, configure domain, final checks",
            60,
            (7,),
        ),
    ),
)

PRESENTATION = TaskTemplate(
    archetype=Archetype.PRESENTATION,
    id_prefix="pres",
    triggers=("presentation", "pitch deck", "slides"),
    steps=(
        StepBlueprint(
            "Define Objectives & Audience",
            "Clarify goals, understand audience, key messages",
            30,
        ),
        StepBlueprint(
            "Outline Structure",
            "Create slide outline, organize flow, key points",
            45,
        ),
        StepBlueprint(
            "Gather Content & Data",
            "Collect information, statistics, examples, visuals",
            60,
        ),
        StepBlueprint(
            "Design Template",
            "Choose theme, create consistent design, branding",
            45,
        ),
        StepBlueprint(
            "Create Slides",
            "Build all slides, add content, format text",
            120,
            (4,),
        ),
        StepBlueprint(
            "Add Visuals",
            "Insert images, charts, diagrams, animations",
            60,
            (5,),
        ),
        StepBlueprint(
            "Practice & Refine",
            "Rehearse presentation, get feedback, make edits",
            90,
            (6,),
        ),
    ),
)

REPORT = TaskTemplate(
    archetype=Archetype.REPORT,
    id_prefix="rep",
    triggers=("report", "document", "analysis"),
    steps=(
        StepBlueprint(
            "Research & Data Collection",
            "Gather information, sources, statistics, references",
            {C.MODERATE: 90, C.COMPLEX: 180, C.VERY_COMPLEX: 90},
        ),
        StepBlueprint(
            "Create Outline",
            "Structure report, organize sections, key points",
            30,
        ),
        StepBlueprint(
            "Write Introduction",
            "Executive summary, objectives, scope",
            45,
            (2,),
        ),
        StepBlueprint(
            "Write Main Content",
            "Develop all sections, analysis, findings",
            {C.MODERATE: 120, C.COMPLEX: 240, C.VERY_COMPLEX: 120},
            (3,),
        ),
        StepBlueprint(
            "Add Visuals & Data",
            "Insert charts, tables, graphs, images",
            60,
            (4,),
        ),
        StepBlueprint(
            "Write Conclusion",
            "Summarize findings, recommendations, next steps",
            30,
            (5,),
        ),
        StepBlueprint(
            "Review & Edit",
            "Proofread, fact-check, format, citations",
            90,
            (6,),
        ),
    ),
)

EVENT = TaskTemplate(
    archetype=Archetype.EVENT,
    id_prefix="evt",
    triggers=("event", "meeting", "workshop"),
    steps=(
        StepBlueprint(
            "Define Event Scope",
            "Purpose, objectives, target audience, date & time",
            30,
        ),
        StepBlueprint(
            "Budget Planning",
            "Estimate costs, allocate resources, secure funding",
            45,
        ),
        StepBlueprint(
            "Book Venue",
            "Research locations, compare options, make reservation",
            90,
        ),
        StepBlueprint(
            "Create Guest List",
            "Identify attendees, collect contact info, send invites",
            60,
        ),
        StepBlueprint(
            "Plan Agenda",
            "Schedule activities, speakers, breaks, timeline",
            45,
        ),
        StepBlueprint(
            "Arrange Catering & Logistics",
            "Order food, setup AV, arrange seating, materials",
            120,
            (3,),
        ),
        StepBlueprint(
            "Promote Event",
            "Marketing, social media, email campaigns, reminders",
            60,
        ),
        StepBlueprint(
            "Final Preparations",
            "Confirm RSVPs, finalize details, setup checklist",
            60,
            (4, 6),
        ),
    ),
)

LAUNCH = TaskTemplate(
    archetype=Archetype.LAUNCH,
    id_prefix="lnch",
    triggers=("launch", "release", "deploy"),
    steps=(
        StepBlueprint(
            "Pre-Launch Preparation",
            "Final product check, documentation, assets ready",
            120,
        ),
        StepBlueprint(
            "Create Launch Plan",
            "Timeline, marketing strategy, channels, messaging",
            90,
        ),
        StepBlueprint(
            "Prepare Marketing Materials",
            "Copy, graphics, videos, landing pages, emails",
            180,
        ),
        StepBlueprint(
            "Setup Analytics & Tracking",
            "Configure tracking, goals, conversion funnels",
            60,
        ),
        StepBlueprint(
            "Soft Launch / Beta",
            "Limited release, gather feedback, fix issues",
            240,
            (1, 4),
        ),
        StepBlueprint(
            "Execute Launch Campaign",
            "Go live, publish content, email blast, social media",
            120,
            (5,),
        ),
        StepBlueprint(
            "Monitor & Respond",
            "Track metrics, respond to feedback, fix urgent issues",
            180,
            (6,),
        ),
        StepBlueprint(
            "Post-Launch Analysis",
            "Review results, document learnings, plan next steps",
            90,
            (7,),
        ),
    ),
)

LEARNING = TaskTemplate(
    archetype=Archetype.LEARNING,
    id_prefix="lrn",
    triggers=("learn", "study", "course"),
    steps=(
        StepBlueprint(
            "Define Learning Goals",
            "What to learn, why, success criteria",
            20,
        ),
        StepBlueprint(
            "Find Resources",
            "Courses, books, tutorials, documentation",
            45,
        ),
        StepBlueprint(
            "Create Study Plan",
            "Schedule learning time, milestones, practice",
            30,
        ),
        StepBlueprint(
            "Complete Core Material",
            "Work through lessons, take notes, understand concepts",
            {C.MODERATE: 240, C.COMPLEX: 480, C.VERY_COMPLEX: 240},
            (3,),
        ),
        StepBlueprint(
            "Practice & Apply",
            "Hands-on exercises, projects, real-world application",
            180,
            (4,),
        ),
        StepBlueprint(
            "Review & Test Knowledge",
            "Quiz yourself, review notes, identify gaps",
            90,
            (5,),
        ),
    ),
)

WRITING = TaskTemplate(
    archetype=Archetype.WRITING,
    id_prefix="wrt",
    triggers=("write", "blog", "article"),
    steps=(
        StepBlueprint(
            "Research & Brainstorm",
            "Gather ideas, sources, inspiration, angles",
            60,
        ),
        StepBlueprint(
            "Create Outline",
            "Structure content, organize flow, key points",
            30,
        ),
        StepBlueprint(
            "Write First Draft",
            "Get ideas down, don't edit yet, complete thoughts",
            {C.MODERATE: 90, C.COMPLEX: 180, C.VERY_COMPLEX: 90},
            (2,),
        ),
        StepBlueprint(
            "Revise & Refine",
            "Improve clarity, flow, structure, arguments",
            90,
            (3,),
        ),
        StepBlueprint(
            "Edit & Proofread",
            "Grammar, spelling, formatting, style",
            45,
            (4,),
        ),
        StepBlueprint(
            "Get Feedback",
            "Share with others, incorporate suggestions",
            60,
            (5,),
        ),
        StepBlueprint(
            "Final Polish",
            "Last pass, final tweaks, prepare for publication",
            30,
            (6,),
        ),
    ),
)

GENERIC = TaskTemplate(
    archetype=Archetype.GENERIC,
    id_prefix="gen",
    triggers=(),
    simple_core=3,
    steps=(
        StepBlueprint(
            "Plan & Research",
            "Understand requirements, gather information, create approach",
            45,
        ),
        StepBlueprint(
            "Setup & Preparation",
            "Gather tools, materials, resources needed",
            30,
        ),
        StepBlueprint(
            "Execute Main Work",
            "Complete the core task activities",
            {C.MODERATE: 90, C.COMPLEX: 180, C.VERY_COMPLEX: 90},
            (2,),
        ),
        StepBlueprint(
            "Review & Refine",
            "Check quality, make improvements, fix issues",
            60,
            (3,),
        ),
        StepBlueprint(
            "Finalize & Complete",
            "Final touches, documentation, handoff",
            30,
            (4,),
        ),
    ),
)

# Declaration order is selection precedence.
TEMPLATE_CATALOG: tuple[TaskTemplate, ...] = (
    WEB_PROJECT,
    PRESENTATION,
    REPORT,
    EVENT,
    LAUNCH,
    LEARNING,
    WRITING,
    GENERIC,
)

_TEMPLATES_BY_ARCHETYPE: dict[Archetype, TaskTemplate] = {
    template.archetype: template for template in TEMPLATE_CATALOG
}

STRATEGY_DESCRIPTIONS: dict[ComplexityTier, str] = {
    C.VERY_COMPLEX: (
        "Large project requiring systematic planning and execution across multiple phases"
    ),
    C.COMPLEX: (
        "Substantial task best approached through structured breakdown and sequential completion"
    ),
    C.MODERATE: "Multi-step task benefiting from organized phases and clear milestones",
    C.SIMPLE: "Straightforward task with clear steps to completion",
}


def get_template(archetype: Archetype) -> TaskTemplate:
    """Get the template for an archetype."""
    return _TEMPLATES_BY_ARCHETYPE[archetype]
