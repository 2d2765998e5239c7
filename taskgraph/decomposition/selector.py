"""Template selector - picks a decomposition archetype for task text."""

from loguru import logger

from taskgraph.decomposition.classifier import combine_text
from taskgraph.decomposition.models import Archetype
from taskgraph.decomposition.templates import TEMPLATE_CATALOG


def select_template(title: str, description: str | None = None) -> Archetype:
    """
    Select the decomposition archetype for a task.

    Trigger keywords are tested in catalog declaration order and the first
    archetype with any substring match wins, even when a later archetype's
    keywords also appear. Text matching nothing selects ``generic``.

    Args:
        title: Task title.
        description: Optional task description.

    Returns:
        Selected Archetype.

    Example:
        >>> select_template("Write a blog post about X")
        <Archetype.WRITING: 'writing'>
        >>> select_template("buy milk")
        <Archetype.GENERIC: 'generic'>
    """
    text = combine_text(title, description)

    for template in TEMPLATE_CATALOG:
        matched = next((kw for kw in template.triggers if kw in text), None)
        if matched is not None:
            logger.debug(f"Selected {template.archetype.value} template (trigger '{matched}')")
            return template.archetype

    logger.debug("No archetype trigger matched, using generic template")
    return Archetype.GENERIC
