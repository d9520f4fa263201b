"""Grade and attendance report aggregation.

Pure functions over records that were already loaded from storage.  Nothing
here touches the database, and none of the input sequences are mutated.

Letter grades are resolved by walking the grading scale in its declared
order and taking the first threshold the average meets.  The scale is not
sorted first, so a custom scale stored as ``F:0, A:90, ...`` resolves every
average to "F".  Callers that build scales must keep them highest-first.
"""

import math
from collections.abc import Iterable, Sequence

from app.models.attendance import AttendanceStatus
from app.schemas.report import (
    AttendanceRecord,
    AttendanceSummary,
    GradeConfigRecord,
    GradeRecord,
    GradeScaleEntry,
    OverallReport,
    SubjectReport,
)

DEFAULT_GRADING_SCALE: tuple[tuple[str, float], ...] = (
    ("A", 90.0),
    ("B", 80.0),
    ("C", 70.0),
    ("D", 60.0),
    ("F", 0.0),
)
FALLBACK_LETTER = "F"


# ---------------------------------------------------------------------------
# Building blocks
# ---------------------------------------------------------------------------

def grade_percentage(score: float, max_score: float) -> float:
    """Return ``score / max_score * 100`` with IEEE semantics for a zero max.

    A zero ``max_score`` is an invalid record that should have been rejected
    upstream; it yields ``inf`` (or ``nan`` for a zero score) instead of
    raising, so the bad value shows up in the report.
    """
    if max_score == 0:
        if score == 0 or math.isnan(score):
            return math.nan
        return math.copysign(math.inf, score)
    return score / max_score * 100


def weighted_average(grades: Iterable[GradeRecord]) -> float:
    """Weighted mean of grade percentages; missing weights count as 1."""
    total = 0.0
    weight_sum = 0.0
    for grade in grades:
        weight = 1.0 if grade.weight is None else grade.weight
        total += grade_percentage(grade.score, grade.max_score) * weight
        weight_sum += weight
    return total / weight_sum if weight_sum > 0 else 0.0


def _scale_pairs(config: GradeConfigRecord | None) -> Sequence[tuple[str, float]]:
    if config is None or not config.grading_scale:
        return DEFAULT_GRADING_SCALE
    return [(entry.letter, entry.min_score) for entry in config.grading_scale]


def resolve_grade_letter(
    average: float,
    scale: Sequence[tuple[str, float]] | Sequence[GradeScaleEntry] | None = None,
) -> str:
    """First letter (in declared order) whose threshold is ≤ ``average``."""
    if scale is None:
        scale = DEFAULT_GRADING_SCALE
    for item in scale:
        if isinstance(item, GradeScaleEntry):
            letter, min_score = item.letter, item.min_score
        else:
            letter, min_score = item
        if average >= min_score:
            return letter
    return FALLBACK_LETTER


def group_by_assessment_type(grades: Iterable[GradeRecord]) -> dict[str, list[GradeRecord]]:
    grouped: dict[str, list[GradeRecord]] = {}
    for grade in grades:
        grouped.setdefault(grade.assessment_type, []).append(grade)
    return grouped


def summarize_attendance(records: Sequence[AttendanceRecord]) -> AttendanceSummary:
    counts = {status: 0 for status in AttendanceStatus}
    for record in records:
        counts[AttendanceStatus(record.status)] += 1

    total = len(records)
    present = counts[AttendanceStatus.PRESENT]
    return AttendanceSummary(
        total=total,
        present=present,
        absent=counts[AttendanceStatus.ABSENT],
        late=counts[AttendanceStatus.LATE],
        excused=counts[AttendanceStatus.EXCUSED],
        attendance_rate=(present / total * 100) if total > 0 else 0.0,
    )


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------

def compute_subject_report(
    subject: str,
    grades: Sequence[GradeRecord],
    config: GradeConfigRecord | None = None,
) -> SubjectReport:
    """Summarize one subject out of a student's full grade list."""
    subject_grades = [g for g in grades if g.subject == subject]
    average = weighted_average(subject_grades)

    return SubjectReport(
        subject=subject,
        grades=subject_grades,
        grouped_by_assessment_type=group_by_assessment_type(subject_grades),
        average=average,
        grade_letter=resolve_grade_letter(average, _scale_pairs(config)),
        config=config,
        total_assessments=len(subject_grades),
        last_assessment_date=max((g.date for g in subject_grades), default=None),
    )


def compute_overall_report(
    all_grades: Sequence[GradeRecord],
    all_configs: Sequence[GradeConfigRecord],
    attendance: Sequence[AttendanceRecord],
) -> OverallReport:
    """Per-subject reports plus overall average and attendance summary."""
    # dict keeps first-seen order
    subjects = list(dict.fromkeys(g.subject for g in all_grades))

    configs_by_subject: dict[str, GradeConfigRecord] = {}
    for config in all_configs:
        configs_by_subject.setdefault(config.subject, config)

    subject_reports = [
        compute_subject_report(subject, all_grades, configs_by_subject.get(subject))
        for subject in subjects
    ]

    overall_average = (
        sum(r.average for r in subject_reports) / len(subject_reports)
        if subject_reports
        else 0.0
    )

    return OverallReport(
        subject_reports=subject_reports,
        overall_average=overall_average,
        total_subjects=len(subjects),
        total_assessments=len(all_grades),
        attendance_summary=summarize_attendance(attendance),
    )
