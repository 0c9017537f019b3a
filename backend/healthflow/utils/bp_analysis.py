"""
Blood pressure classification and trend analysis.

Pure rule engine over a sequence of readings ordered most-recent-first.
Thresholds are KDIGO-aligned for IgA nephropathy patients. Nothing in this
module touches Flask, the database, or credentials; insufficient data is
reported through sentinel values, never exceptions.
"""
import math
from dataclasses import dataclass, field
from datetime import date as date_type, time as time_type
from enum import Enum
from typing import Optional, Sequence

# Classification thresholds
SYSTOLIC_NORMAL = 120
DIASTOLIC_NORMAL = 80
SYSTOLIC_ELEVATED = 130
SYSTOLIC_STAGE1 = 140
DIASTOLIC_STAGE1 = 90

# Kidney risk: rolling average of the most recent readings
KIDNEY_RISK_SYSTOLIC = 130
KIDNEY_RISK_DIASTOLIC = 80
KIDNEY_RISK_WINDOW = 5

# Short-term trend between the two most recent readings
TREND_DELTA = 5

# Long-term progress: two 3-reading windows
PROGRESS_WINDOW = 6
PROGRESS_DELTA = 5
HEALTHY_AVG_SYSTOLIC = 130
HEALTHY_AVG_DIASTOLIC = 85

NO_RISK_DATA = '—'
INSUFFICIENT_TREND_MESSAGE = 'Add at least 2 readings to see your short-term trend.'
INSUFFICIENT_PROGRESS_MESSAGE = 'Add at least 6 readings for a long-term progress report.'


class BPCategory(str, Enum):
    NORMAL = 'Normal'
    ELEVATED = 'Elevated'
    STAGE_1 = 'Stage 1 Hypertension'
    STAGE_2 = 'Stage 2 Hypertension'


class Trend(str, Enum):
    STABLE = 'Stable'
    IMPROVING = 'Improving'
    WORSENING = 'Worsening'
    FLUCTUATING = 'Fluctuating'
    INSUFFICIENT_DATA = 'Not enough data'


class ProgressStatus(str, Enum):
    INSUFFICIENT = 'insufficient'
    IMPROVING = 'improving'
    WORSENING = 'worsening'
    STABLE_HEALTHY = 'stable_healthy'
    STABLE_ELEVATED = 'stable_elevated'
    FLUCTUATING = 'fluctuating'


@dataclass(frozen=True)
class Reading:
    """One blood pressure / pulse observation."""
    systolic: int
    diastolic: int
    pulse: Optional[int] = None
    date: Optional[date_type] = None
    time: Optional[time_type] = None


@dataclass(frozen=True)
class BPAverage:
    systolic: int
    diastolic: int

    def __str__(self):
        return f'{self.systolic}/{self.diastolic}'

    def to_dict(self):
        return {'systolic': self.systolic, 'diastolic': self.diastolic}


@dataclass(frozen=True)
class TrendResult:
    trend: Trend
    risk: str
    message: str

    def to_dict(self):
        return {'trend': self.trend.value, 'risk': self.risk, 'message': self.message}


@dataclass(frozen=True)
class LongTermProgress:
    status: ProgressStatus
    narrative: str
    earlier: Optional[BPAverage] = None
    recent: Optional[BPAverage] = None
    overall: Optional[BPAverage] = None

    def to_dict(self):
        return {
            'status': self.status.value,
            'narrative': self.narrative,
            'earlier': self.earlier.to_dict() if self.earlier else None,
            'recent': self.recent.to_dict() if self.recent else None,
            'overall': self.overall.to_dict() if self.overall else None,
        }


@dataclass(frozen=True)
class ChartSeries:
    labels: list = field(default_factory=list)
    systolic: list = field(default_factory=list)
    diastolic: list = field(default_factory=list)

    def to_dict(self):
        return {
            'labels': list(self.labels),
            'systolic': list(self.systolic),
            'diastolic': list(self.diastolic),
        }


def classify(systolic: int, diastolic: int) -> BPCategory:
    """Classify a single reading.

    The Stage 1 test is an OR: a reading is Stage 1 when *either* value is
    under its Stage 1 ceiling, so 200/60 is Stage 1, not Stage 2. Callers
    that display the category rely on this exact rule table.
    """
    if systolic < SYSTOLIC_NORMAL and diastolic < DIASTOLIC_NORMAL:
        return BPCategory.NORMAL
    if systolic < SYSTOLIC_ELEVATED and diastolic < DIASTOLIC_NORMAL:
        return BPCategory.ELEVATED
    if systolic < SYSTOLIC_STAGE1 or diastolic < DIASTOLIC_STAGE1:
        return BPCategory.STAGE_1
    return BPCategory.STAGE_2


_TIPS = {
    BPCategory.NORMAL: (
        '✅ Excellent! Well-controlled BP is key for kidney health. Keep up the great work.'
    ),
    BPCategory.ELEVATED: (
        '⚠️ Slightly elevated. A good time to focus on lifestyle changes like reducing salt.'
    ),
    BPCategory.STAGE_1: (
        '⚠️ BP in mild hypertension range. Consistent monitoring and lifestyle '
        'adjustments are important.'
    ),
    BPCategory.STAGE_2: (
        '🚨 High BP. Please consult your doctor to manage this, as high BP can '
        'accelerate kidney damage.'
    ),
}


def category_tip(category: BPCategory) -> str:
    """Advice line shown under the latest reading."""
    return _TIPS[BPCategory(category)]


def status_class(category: BPCategory) -> str:
    """Display bucket for a category: normal, elevated or high."""
    category = BPCategory(category)
    if category is BPCategory.NORMAL:
        return 'normal'
    if category is BPCategory.ELEVATED:
        return 'elevated'
    return 'high'


def determine_trend(latest, previous) -> Trend:
    """Short-term direction between the two most recent readings.

    Checked in order: Stable, Improving, Worsening, then Fluctuating.
    """
    delta_sys = latest.systolic - previous.systolic
    delta_dia = latest.diastolic - previous.diastolic

    if abs(delta_sys) < TREND_DELTA and abs(delta_dia) < TREND_DELTA:
        return Trend.STABLE
    if delta_sys <= -TREND_DELTA and delta_dia <= -TREND_DELTA:
        return Trend.IMPROVING
    if delta_sys >= TREND_DELTA or delta_dia >= TREND_DELTA:
        return Trend.WORSENING
    return Trend.FLUCTUATING


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def average_bp(readings: Sequence) -> BPAverage:
    """Mean systolic and diastolic, each rounded independently.

    An empty sequence yields 0/0.
    """
    if not readings:
        return BPAverage(0, 0)
    total_sys = sum(r.systolic for r in readings)
    total_dia = sum(r.diastolic for r in readings)
    count = len(readings)
    return BPAverage(
        systolic=_round_half_up(total_sys / count),
        diastolic=_round_half_up(total_dia / count),
    )


def is_kidney_risk_elevated(avg: BPAverage) -> bool:
    return avg.systolic >= KIDNEY_RISK_SYSTOLIC or avg.diastolic >= KIDNEY_RISK_DIASTOLIC


def assess_kidney_risk(readings: Sequence) -> str:
    """Flag kidney strain from the average of the most recent readings."""
    avg = average_bp(readings[:KIDNEY_RISK_WINDOW])
    if is_kidney_risk_elevated(avg):
        return (
            f'⚠️ Higher kidney strain likely (avg ≥ {KIDNEY_RISK_SYSTOLIC}/'
            f'{KIDNEY_RISK_DIASTOLIC}). Consult your doctor.'
        )
    return '✅ Good! Your recent average suggests kidney pressure is being managed.'


def trend_message(trend: Trend, category: BPCategory) -> str:
    trend = Trend(trend)
    if trend is Trend.IMPROVING:
        return 'Great job! Your BP is improving, which helps protect your kidneys.'
    if trend is Trend.STABLE and BPCategory(category) is BPCategory.NORMAL:
        return 'Excellent, your BP is stable and in a healthy range.'
    if trend is Trend.WORSENING:
        return 'Your BP appears to be rising. This is an important signal to watch closely.'
    if trend is Trend.FLUCTUATING:
        return 'Your BP is fluctuating. Aim for consistency in diet, exercise, and medication.'
    return 'Continue monitoring your readings to establish a clear trend.'


def analyze_bp_trend(readings: Sequence) -> TrendResult:
    """Trend, kidney risk and narrative for the most recent readings."""
    if len(readings) < 2:
        return TrendResult(
            trend=Trend.INSUFFICIENT_DATA,
            risk=NO_RISK_DATA,
            message=INSUFFICIENT_TREND_MESSAGE,
        )

    latest, previous = readings[0], readings[1]
    category = classify(latest.systolic, latest.diastolic)
    trend = determine_trend(latest, previous)
    return TrendResult(
        trend=trend,
        risk=assess_kidney_risk(readings),
        message=trend_message(trend, category),
    )


def long_term_progress(readings: Sequence) -> LongTermProgress:
    """Compare the earlier and recent halves of the last six readings."""
    if len(readings) < PROGRESS_WINDOW:
        return LongTermProgress(
            status=ProgressStatus.INSUFFICIENT,
            narrative=INSUFFICIENT_PROGRESS_MESSAGE,
        )

    chronological = list(reversed(readings[:PROGRESS_WINDOW]))
    half = PROGRESS_WINDOW // 2
    earlier = average_bp(chronological[:half])
    recent = average_bp(chronological[half:])
    overall = average_bp(chronological)

    sys_trend = recent.systolic - earlier.systolic
    dia_trend = recent.diastolic - earlier.diastolic

    if sys_trend < -PROGRESS_DELTA and dia_trend < -PROGRESS_DELTA:
        status = ProgressStatus.IMPROVING
        narrative = (
            f'✅ Great progress! Your average BP has dropped from {earlier} to {recent}.'
        )
    elif sys_trend > PROGRESS_DELTA or dia_trend > PROGRESS_DELTA:
        status = ProgressStatus.WORSENING
        narrative = (
            f'🚨 Your average BP has risen from {earlier} to {recent}. '
            'Please consult your doctor.'
        )
    elif abs(sys_trend) <= PROGRESS_DELTA and abs(dia_trend) <= PROGRESS_DELTA:
        if overall.systolic < HEALTHY_AVG_SYSTOLIC and overall.diastolic < HEALTHY_AVG_DIASTOLIC:
            status = ProgressStatus.STABLE_HEALTHY
            narrative = (
                f'✅ Your BP is stable and in a healthy range ({overall} avg). '
                'Keep up the good work!'
            )
        else:
            status = ProgressStatus.STABLE_ELEVATED
            narrative = (
                f'⚠️ Your BP is stable but remains elevated ({overall} avg). '
                'Continue to monitor closely.'
            )
    else:
        # One axis dropped by more than the delta, the other did not move enough.
        status = ProgressStatus.FLUCTUATING
        narrative = (
            'Your BP is fluctuating. Try to maintain a consistent lifestyle '
            'and medication schedule.'
        )

    return LongTermProgress(
        status=status,
        narrative=narrative,
        earlier=earlier,
        recent=recent,
        overall=overall,
    )


def analyze_long_term_progress(readings: Sequence) -> str:
    return long_term_progress(readings).narrative


def chart_series(readings: Sequence) -> ChartSeries:
    """History in chronological order for the line chart."""
    chronological = list(reversed(readings))
    return ChartSeries(
        labels=[r.date.isoformat() if r.date else None for r in chronological],
        systolic=[r.systolic for r in chronological],
        diastolic=[r.diastolic for r in chronological],
    )


def summarize(readings: Sequence) -> dict:
    """Everything the dashboard shows for a reading history."""
    latest = None
    if readings:
        last = readings[0]
        category = classify(last.systolic, last.diastolic)
        latest = {
            'reading': last,
            'category': category,
            'status': status_class(category),
            'tip': category_tip(category),
        }

    return {
        'latest': latest,
        'trend': analyze_bp_trend(readings),
        'progress': long_term_progress(readings),
        'chart': chart_series(readings),
    }
