"""
Data models for the quote engine.

Uses dataclasses for structured, type-safe data representation. Configuration
entries and computed breakdowns are frozen so they can be shared freely
between callers.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from .validation import validate_config


class ConfigurationError(ValueError):
    """Raised when a pricing configuration cannot be loaded or is inconsistent."""

    def __init__(self, message: str, errors: Optional[list[str]] = None):
        super().__init__(message)
        self.errors = errors or [message]


@dataclass(frozen=True)
class PricingTier:
    """A named service level with its own base rates."""
    id: str
    name: str
    base_price_per_page: float
    base_price_per_word: float
    description: str = ""


@dataclass(frozen=True)
class UrgencyMultiplier:
    """A delivery-speed option. `hours` is the turnaround window."""
    id: str
    name: str
    hours: float
    multiplier: float
    description: str = ""


@dataclass(frozen=True)
class ComplexityMultiplier:
    """A topic difficulty level. `examples` are display-only labels."""
    id: str
    name: str
    multiplier: float
    description: str = ""
    examples: tuple[str, ...] = ()


@dataclass(frozen=True)
class PricingConfiguration:
    """
    Root pricing configuration.

    Collections keep their configured order (lookups never assume sortedness).
    The configuration is validated on construction, so an instance always
    carries unique ids, multipliers >= 1.0 and commission percentages that
    sum to 100.
    """
    tiers: tuple[PricingTier, ...]
    urgencies: tuple[UrgencyMultiplier, ...]
    complexities: tuple[ComplexityMultiplier, ...]
    executor_percentage: float
    reviewer_percentage: float
    platform_percentage: float

    def __post_init__(self):
        # Normalise lists handed in by callers to tuples
        object.__setattr__(self, 'tiers', tuple(self.tiers))
        object.__setattr__(self, 'urgencies', tuple(self.urgencies))
        object.__setattr__(self, 'complexities', tuple(self.complexities))

        report = validate_config(self)
        if not report.valid:
            raise ConfigurationError(
                "Invalid pricing configuration: " + "; ".join(report.errors),
                errors=report.errors,
            )

    def get_tier(self, tier_id: str) -> Optional[PricingTier]:
        return _find(self.tiers, tier_id)

    def get_urgency(self, urgency_id: str) -> Optional[UrgencyMultiplier]:
        return _find(self.urgencies, urgency_id)

    def get_complexity(self, complexity_id: str) -> Optional[ComplexityMultiplier]:
        return _find(self.complexities, complexity_id)

    @classmethod
    def from_dict(cls, data: dict) -> 'PricingConfiguration':
        """
        Build a configuration from its JSON shape.

        Each collection may be an object keyed by id or a list of objects
        carrying an `id` field.
        """
        if not isinstance(data, dict):
            raise ConfigurationError("Pricing configuration must be a JSON object")

        try:
            tiers = [
                PricingTier(
                    id=tier_id,
                    name=str(entry.get('name', tier_id)),
                    base_price_per_page=_number(entry['base_price_per_page']),
                    base_price_per_word=_number(entry['base_price_per_word']),
                    description=str(entry.get('description', '')),
                )
                for tier_id, entry in _entries(data.get('tiers'), 'tiers')
            ]
            urgencies = [
                UrgencyMultiplier(
                    id=urgency_id,
                    name=str(entry.get('name', urgency_id)),
                    hours=_number(entry['hours']),
                    multiplier=_number(entry['multiplier']),
                    description=str(entry.get('description', '')),
                )
                for urgency_id, entry in _entries(data.get('urgency'), 'urgency')
            ]
            complexities = [
                ComplexityMultiplier(
                    id=complexity_id,
                    name=str(entry.get('name', complexity_id)),
                    multiplier=_number(entry['multiplier']),
                    description=str(entry.get('description', '')),
                    examples=_examples(entry.get('examples', []), complexity_id),
                )
                for complexity_id, entry in _entries(data.get('complexity'), 'complexity')
            ]
            percentages = {
                key: _number(data[key])
                for key in ('executor_percentage', 'reviewer_percentage', 'platform_percentage')
            }
        except KeyError as e:
            raise ConfigurationError(f"Missing required pricing field: {e.args[0]}") from e
        except TypeError as e:
            raise ConfigurationError(f"Malformed pricing configuration: {e}") from e

        return cls(
            tiers=tuple(tiers),
            urgencies=tuple(urgencies),
            complexities=tuple(complexities),
            **percentages,
        )

    def to_dict(self) -> dict:
        """Convert back to the JSON shape accepted by `from_dict`."""
        return {
            "tiers": {
                t.id: {
                    "name": t.name,
                    "description": t.description,
                    "base_price_per_page": t.base_price_per_page,
                    "base_price_per_word": t.base_price_per_word,
                }
                for t in self.tiers
            },
            "urgency": {
                u.id: {
                    "name": u.name,
                    "hours": u.hours,
                    "multiplier": u.multiplier,
                    "description": u.description,
                }
                for u in self.urgencies
            },
            "complexity": {
                c.id: {
                    "name": c.name,
                    "multiplier": c.multiplier,
                    "description": c.description,
                    "examples": list(c.examples),
                }
                for c in self.complexities
            },
            "executor_percentage": self.executor_percentage,
            "reviewer_percentage": self.reviewer_percentage,
            "platform_percentage": self.platform_percentage,
        }


def _find(entries, entry_id):
    for entry in entries:
        if entry.id == entry_id:
            return entry
    return None


def _entries(raw: Any, section: str) -> list[tuple[str, dict]]:
    """Normalise a keyed object or a list of objects into (id, entry) pairs."""
    if isinstance(raw, dict):
        pairs = [(str(key), value) for key, value in raw.items()]
    elif isinstance(raw, list):
        pairs = []
        for value in raw:
            if not isinstance(value, dict) or 'id' not in value:
                raise ConfigurationError(f"Every '{section}' list entry needs an 'id'")
            pairs.append((str(value['id']), value))
    else:
        raise ConfigurationError(f"Pricing configuration section '{section}' is missing")

    for entry_id, value in pairs:
        if not isinstance(value, dict):
            raise ConfigurationError(f"Entry '{entry_id}' in '{section}' must be an object")
    return pairs


def _examples(value: Any, complexity_id: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ConfigurationError(f"Complexity '{complexity_id}' examples must be a list, got {value!r}")
    return tuple(str(e) for e in value)


def _number(value: Any) -> float:
    if isinstance(value, bool):
        raise ConfigurationError(f"Expected a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Expected a number, got {value!r}") from e


class SizingMode(str, Enum):
    """How a job is measured."""
    PAGES = "pages"
    WORDS = "words"


@dataclass(frozen=True)
class Pages:
    """Job sized by page count. `count` is the raw caller value."""
    count: Any
    mode = SizingMode.PAGES


@dataclass(frozen=True)
class Words:
    """Job sized by word count. `count` is the raw caller value."""
    count: Any
    mode = SizingMode.WORDS


Sizing = Union[Pages, Words]


@dataclass(frozen=True)
class JobParameters:
    """A quote request: the three selections plus exactly one sizing measure."""
    tier_id: str
    urgency_id: str
    complexity_id: str
    sizing: Sizing

    @classmethod
    def from_form(
        cls,
        tier_id: str,
        urgency_id: str,
        complexity_id: str,
        mode: Union[SizingMode, str],
        pages: Any = None,
        words: Any = None,
    ) -> 'JobParameters':
        """
        Build parameters from the two loosely-typed form fields.

        Only the field of the active mode is kept; the other is ignored.
        """
        mode = SizingMode(mode)
        sizing = Pages(pages) if mode is SizingMode.PAGES else Words(words)
        return cls(
            tier_id=tier_id,
            urgency_id=urgency_id,
            complexity_id=complexity_id,
            sizing=sizing,
        )


@dataclass(frozen=True)
class CommissionSplit:
    """The three shares of a total price."""
    executor_payout: float
    reviewer_commission: float
    platform_fee: float

    @property
    def total(self) -> float:
        return self.executor_payout + self.reviewer_commission + self.platform_fee


@dataclass(frozen=True)
class PriceBreakdown:
    """Computed price of one job. Values are unrounded."""
    base_price: float
    total_price: float
    executor_payout: float
    reviewer_commission: float
    platform_fee: float
    urgency_multiplier: float
    complexity_multiplier: float

    def to_dict(self) -> dict:
        return {
            "base_price": self.base_price,
            "total_price": self.total_price,
            "executor_payout": self.executor_payout,
            "reviewer_commission": self.reviewer_commission,
            "platform_fee": self.platform_fee,
            "urgency_multiplier": self.urgency_multiplier,
            "complexity_multiplier": self.complexity_multiplier,
        }


class QuoteStatus(str, Enum):
    OK = "ok"
    NOT_COMPUTABLE = "not_computable"
    INVALID_SELECTION = "invalid_selection"


@dataclass
class TraceStep:
    """A single step in the quote calculation trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass
class QuoteResult:
    """Outcome of a quote calculation with its execution trace."""
    status: QuoteStatus
    breakdown: Optional[PriceBreakdown] = None
    reason: Optional[str] = None
    invalid_fields: list[str] = field(default_factory=list)
    trace: list[TraceStep] = field(default_factory=list)

    @property
    def is_ok(self) -> bool:
        return self.status is QuoteStatus.OK

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the trace for this quote."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"→ {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"→ {t.step}: {t.description}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "breakdown": self.breakdown.to_dict() if self.breakdown else None,
            "reason": self.reason,
            "invalid_fields": list(self.invalid_fields),
            "trace": [
                {"step": t.step, "description": t.description, "value": t.value}
                for t in self.trace
            ],
        }
