"""Complexity classifier - maps task text to a complexity tier.

Keyword sets are checked from the most severe tier down, so a text that
mentions both "launch" and "fix" lands in the higher tier. Text with no
keyword at all is classified by length.
"""

from loguru import logger

from taskgraph.decomposition.models import ComplexityTier

# Ordered most-severe first; first matching tier wins.
COMPLEXITY_KEYWORDS: tuple[tuple[ComplexityTier, tuple[str, ...]], ...] = (
    (
        ComplexityTier.VERY_COMPLEX,
        (
            "launch",
            "build entire",
            "complete overhaul",
            "full implementation",
            "end-to-end",
        ),
    ),
    (
        ComplexityTier.COMPLEX,
        (
            "implement",
            "develop",
            "create system",
            "design and build",
            "full",
        ),
    ),
    (
        ComplexityTier.MODERATE,
        (
            "update",
            "improve",
            "refactor",
            "optimize",
            "enhance",
        ),
    ),
    (
        ComplexityTier.SIMPLE,
        (
            "fix",
            "change",
            "add",
            "remove",
            "update",
        ),
    ),
)

COMPLEX_LENGTH_THRESHOLD = 200
MODERATE_LENGTH_THRESHOLD = 100


def combine_text(title: str, description: str | None = None) -> str:
    """Join a task title and optional description into one lowercase text.

    Args:
        title: Task title.
        description: Optional task description.

    Returns:
        ``"{title} {description}"`` case-folded.
    """
    return f"{title} {description or ''}".casefold()


def classify(text: str) -> ComplexityTier:
    """
    Classify task text into a complexity tier.

    Args:
        text: Task text (title plus description); case does not matter.

    Returns:
        The first tier whose keywords appear in the text, otherwise a
        tier derived from the text length.

    Example:
        >>> classify("launch the full end-to-end platform")
        <ComplexityTier.VERY_COMPLEX: 'very-complex'>
        >>> classify("")
        <ComplexityTier.SIMPLE: 'simple'>
    """
    folded = text.casefold()

    for tier, keywords in COMPLEXITY_KEYWORDS:
        matched = next((kw for kw in keywords if kw in folded), None)
        if matched is not None:
            logger.debug(f"Classified as {tier.value} (keyword '{matched}')")
            return tier

    if len(folded) > COMPLEX_LENGTH_THRESHOLD:
        tier = ComplexityTier.COMPLEX
    elif len(folded) > MODERATE_LENGTH_THRESHOLD:
        tier = ComplexityTier.MODERATE
    else:
        tier = ComplexityTier.SIMPLE

    logger.debug(f"Classified as {tier.value} by length ({len(folded)} chars)")
    return tier
