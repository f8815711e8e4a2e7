"""Subject classification into priority tiers and general education categories."""

from .constants import (
    ARCH_SUBSTRING,
    DOUBLE_UNIT_LEC,
    GEN_ED_CATEGORIES,
    MATH_DEPARTMENT,
    MATH_PREFIX,
)
from .models import ExamSection, GenEdCategory, PinnedBlock, PriorityTier


def _build_categories() -> tuple[GenEdCategory, ...]:
    return tuple(
        GenEdCategory(
            name=name,
            prefixes=tuple(config["prefixes"]),
            blocks=tuple(PinnedBlock(day, slot, capacity) for day, slot, capacity in config["blocks"]),
        )
        for name, config in GEN_ED_CATEGORIES.items()
    )


# Declaration order matters: the first matching category wins
CATEGORIES: tuple[GenEdCategory, ...] = _build_categories()


def get_gen_ed_category(subject_id: str) -> GenEdCategory | None:
    """Find the general education category of a subject.

    Args:
        subject_id: Subject identifier (e.g. 'ETHC101')

    Returns:
        The first category whose prefix matches, or None
    """
    if not subject_id:
        return None
    for category in CATEGORIES:
        if category.matches(subject_id):
            return category
    return None


def is_gen_ed(subject_id: str) -> bool:
    """Check if a subject is a general education subject."""
    return get_gen_ed_category(subject_id) is not None


def is_math(subject_id: str, dept: str) -> bool:
    """Check if a subject is a mathematics subject of the engineering sciences department."""
    return subject_id.upper().strip().startswith(MATH_PREFIX) and dept == MATH_DEPARTMENT


def is_arch(subject_id: str) -> bool:
    """Check if a subject is an architecture subject (substring match anywhere)."""
    return ARCH_SUBSTRING in subject_id.upper()


def is_double_unit(lec: int) -> bool:
    """Check if a lecture-unit count requires two consecutive slots."""
    return lec == DOUBLE_UNIT_LEC


def classify_subject(subject_id: str, dept: str) -> PriorityTier:
    """Classify a subject into a priority tier.

    Precedence: general education, mathematics, architecture, major.
    """
    if is_gen_ed(subject_id):
        return PriorityTier.GEN_ED
    if is_math(subject_id, dept):
        return PriorityTier.MATH
    if is_arch(subject_id):
        return PriorityTier.ARCH
    return PriorityTier.MAJOR


def classify(section: ExamSection) -> PriorityTier:
    """Classify an exam section into a priority tier."""
    return classify_subject(section.subject_id, section.dept)
