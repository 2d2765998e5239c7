"""Optional task hints from an external natural-language parser.

The engine never depends on a parser being present. When one is
configured it may refine the task title and description before
classification and suggest an overall duration; any failure falls back to
the caller's own text.
"""

from typing import Protocol, runtime_checkable

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field


class TaskHints(BaseModel):
    """Structured hints returned by a natural-language task parser."""

    model_config = ConfigDict(frozen=True)

    title: str | None = Field(
        default=None,
        description="Cleaned-up task title",
    )
    description: str | None = Field(
        default=None,
        description="Task description extracted from the input",
    )
    estimated_duration_minutes: int | None = Field(
        default=None,
        gt=0,
        description="Suggested overall duration in minutes",
    )


@runtime_checkable
class HintProvider(Protocol):
    """Anything that turns free text into TaskHints."""

    def parse(self, text: str) -> TaskHints:
        """Parse free text into hints."""
        ...


def apply_hints(
    provider: HintProvider | None,
    title: str,
    description: str | None,
) -> tuple[str, str | None, int | None]:
    """
    Consult a hint provider and merge its answer with the caller's text.

    Args:
        provider: Hint provider, or None to skip.
        title: Caller-supplied title.
        description: Caller-supplied description.

    Returns:
        Tuple of (title, description, hinted_duration_minutes). Empty hint
        fields keep the caller's values.
    """
    if provider is None:
        return title, description, None

    text = f"{title} {description or ''}".strip()
    try:
        hints = provider.parse(text)
    except Exception as e:
        logger.warning(f"Hint provider failed: {e}, using task text as given")
        return title, description, None

    if not isinstance(hints, TaskHints):
        logger.warning(
            f"Hint provider returned {type(hints).__name__}, not TaskHints; "
            f"using task text as given"
        )
        return title, description, None

    logger.debug(f"Hint provider returned {hints.model_dump(exclude_none=True)}")
    return (
        hints.title or title,
        hints.description or description,
        hints.estimated_duration_minutes,
    )
