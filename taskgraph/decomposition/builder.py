"""Graph builder - instantiates a template into a concrete subtask DAG."""

from loguru import logger

from taskgraph.decomposition.classifier import classify, combine_text
from taskgraph.decomposition.dependency_resolver import validate_breakdown
from taskgraph.decomposition.models import Breakdown, ComplexityTier, Subtask
from taskgraph.decomposition.selector import select_template
from taskgraph.decomposition.templates import (
    STRATEGY_DESCRIPTIONS,
    TaskTemplate,
    get_template,
    resolve_duration,
)


class BreakdownBuilder:
    """
    Build breakdowns from task text.

    Classifies the task, selects a template and emits one subtask per
    skeleton step with deterministic IDs, tier-scaled durations and the
    template's dependency edges.

    Example:
        >>> builder = BreakdownBuilder()
        >>> breakdown = builder.build("Launch new marketing website")
        >>> breakdown.complexity_tier, breakdown.archetype
        (<ComplexityTier.VERY_COMPLEX: 'very-complex'>, <Archetype.WEB_PROJECT: 'web-project'>)
        >>> breakdown.total_estimated_minutes
        1260
    """

    def build(self, title: str, description: str | None = None) -> Breakdown:
        """
        Build a breakdown for a task.

        Args:
            title: Task title.
            description: Optional task description.

        Returns:
            Breakdown with every subtask incomplete.
        """
        tier = classify(combine_text(title, description))
        archetype = select_template(title, description)
        template = get_template(archetype)

        subtasks = self.instantiate(template, tier)

        breakdown = Breakdown(
            original_task_text=title,
            subtasks=subtasks,
            total_estimated_minutes=sum(s.estimated_duration_minutes for s in subtasks),
            complexity_tier=tier,
            strategy_description=STRATEGY_DESCRIPTIONS[tier],
            archetype=archetype,
        )

        # Templates only reference earlier steps; a failure here is a catalog bug
        validate_breakdown(breakdown)

        logger.info(
            f"Built {archetype.value} breakdown with {len(subtasks)} subtasks "
            f"({tier.value}, {breakdown.total_estimated_minutes} min)"
        )
        return breakdown

    def instantiate(self, template: TaskTemplate, tier: ComplexityTier) -> list[Subtask]:
        """
        Instantiate a template's skeleton for a complexity tier.

        Args:
            template: Template to instantiate.
            tier: Complexity tier scaling durations and truncation.

        Returns:
            Ordered list of Subtask objects.
        """
        steps = template.steps_for(tier)
        if len(steps) < len(template.steps):
            logger.debug(
                f"Truncated {template.archetype.value} skeleton to "
                f"{len(steps)} core steps for simple task"
            )

        return [
            Subtask(
                id=template.subtask_id(index),
                title=step.title,
                description=step.description,
                estimated_duration_minutes=resolve_duration(step.duration, tier),
                order=index,
                completed=False,
                depends_on=[template.subtask_id(dep) for dep in step.depends_on],
            )
            for index, step in enumerate(steps, start=1)
        ]


def build_breakdown(title: str, description: str | None = None) -> Breakdown:
    """Convenience function to build a breakdown.

    Args:
        title: Task title.
        description: Optional task description.

    Returns:
        Breakdown for the task.
    """
    builder = BreakdownBuilder()
    return builder.build(title, description)
