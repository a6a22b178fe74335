from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, Iterable, TypeVar

from fintrack.domain import FREQUENCIES, Budget, Category, Expense, IncomeSource

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Maybe(Generic[T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_some(self) -> bool:
        pass

    def is_none(self) -> bool:
        return not self.is_some()


class Some(Maybe[T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Some(f(self._value))

    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        return f(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_some(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Some({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Some) and self._value == other._value


class Nothing(Maybe[T]):

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Nothing()

    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        return Nothing()

    def get_or_else(self, default: T) -> T:
        return default

    def is_some(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "Nothing()"

    def __eq__(self, other) -> bool:
        return isinstance(other, Nothing)


class Either(Generic[E, T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_right(self) -> bool:
        pass

    def is_left(self) -> bool:
        return not self.is_right()

    @abstractmethod
    def get_error(self) -> E:
        pass


class Right(Either[E, T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Right(f(self._value))

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return f(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_right(self) -> bool:
        return True

    def get_error(self) -> E:
        raise ValueError("Cannot get error from Right")

    def __repr__(self) -> str:
        return f"Right({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return self

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return self

    def get_or_else(self, default: T) -> T:
        return default

    def is_right(self) -> bool:
        return False

    def get_error(self) -> E:
        return self._error

    def __repr__(self) -> str:
        return f"Left({self._error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


def safe_category(cats: Iterable[Category], cat_id: str) -> Maybe[Category]:
    for cat in cats:
        if cat.id == cat_id:
            return Some(cat)
    return Nothing()


def _is_positive_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0


def validate_expense(e: Expense) -> Either[dict, Expense]:
    if not e.category_id or e.date is None:
        return Left({
            "error": "missing_field",
            "message": "Please fill in all required fields",
        })
    if not _is_positive_number(e.amount):
        return Left({
            "error": "invalid_amount",
            "message": "Please enter a valid amount",
            "amount": e.amount,
        })
    return Right(e)


def validate_budget(b: Budget) -> Either[dict, Budget]:
    if not b.category_id or b.start_date is None or b.end_date is None:
        return Left({
            "error": "missing_field",
            "message": "Please fill in all required fields",
        })
    if not _is_positive_number(b.limit_amount):
        return Left({
            "error": "invalid_limit",
            "message": "Please enter a valid budget limit",
            "limit_amount": b.limit_amount,
        })
    if not 0 <= b.alert_threshold <= 100:
        return Left({
            "error": "invalid_threshold",
            "message": "Alert threshold must be between 0 and 100",
            "alert_threshold": b.alert_threshold,
        })
    if b.start_date >= b.end_date:
        return Left({
            "error": "invalid_range",
            "message": "End date must be after start date",
            "start_date": b.start_date,
            "end_date": b.end_date,
        })
    return Right(b)


def validate_income_source(s: IncomeSource) -> Either[dict, IncomeSource]:
    if not s.name or not s.frequency:
        return Left({
            "error": "missing_field",
            "message": "Please fill in all required fields",
        })
    if not _is_positive_number(s.amount):
        return Left({
            "error": "invalid_amount",
            "message": "Please enter a valid amount",
            "amount": s.amount,
        })
    if s.frequency not in FREQUENCIES:
        return Left({
            "error": "invalid_frequency",
            "message": f"Unknown frequency {s.frequency}",
            "frequency": s.frequency,
        })
    return Right(s)
