"""Save-time validation for ORM records.

Models mix in ``ValidationMixin`` and implement ``validate(db)`` with the
helpers below. Errors collect on ``record.errors`` keyed by attribute, with
record-level problems under ``"base"``. ``save`` and ``destroy`` are the only
supported ways for services to persist or remove records.
"""
import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable

from pydantic import EmailStr, TypeAdapter, ValidationError
from sqlalchemy import event, inspect as sa_inspect, select
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

BASE = "base"

CURRENCY_RE = re.compile(r"^(\$)?(\d+)(\.|,)?\d{0,2}?$")

_email_adapter = TypeAdapter(EmailStr)


class RecordInvalid(Exception):
    def __init__(self, record: Any):
        self.record = record
        self.errors = dict(record.errors)
        name = type(record).__name__
        super().__init__(f"{name} is invalid: {full_messages(self.errors)}")


class DeleteRestrictionError(Exception):
    def __init__(self, record: Any, relation: str):
        self.record = record
        self.relation = relation
        name = type(record).__name__
        super().__init__(f"Cannot delete {name} because of dependent {relation}")


def full_messages(errors: dict[str, list[str]]) -> str:
    parts = []
    for attr, messages in errors.items():
        for message in messages:
            if attr == BASE:
                parts.append(message)
            else:
                parts.append(f"{attr.replace('_', ' ').capitalize()} {message}")
    return "; ".join(parts)


class ValidationMixin:
    # relationship names that block deletion while non-empty
    __restrict_on_destroy__: tuple[str, ...] = ()

    @property
    def errors(self) -> dict[str, list[str]]:
        errors = self.__dict__.get("_errors")
        if errors is None:
            errors = {}
            self.__dict__["_errors"] = errors
        return errors

    def add_error(self, attr: str, message: str) -> None:
        self.errors.setdefault(attr, []).append(message)

    @property
    def is_new_record(self) -> bool:
        return not sa_inspect(self).has_identity

    def validate(self, db: Session) -> None:
        """Populate ``self.errors``. Subclasses override."""

    def is_valid(self, db: Session) -> bool:
        self.errors.clear()
        with db.no_autoflush:
            self.validate(db)
        return not self.errors

    def before_destroy(self, db: Session) -> bool:
        return True

    def check_destroy_restrictions(self) -> None:
        for relation in self.__restrict_on_destroy__:
            if getattr(self, relation):
                raise DeleteRestrictionError(self, relation)


# -------------------------
# Field validators
# -------------------------

def _blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def validate_presence(record: ValidationMixin, *attrs: str, message: str = "can't be blank") -> None:
    for attr in attrs:
        if _blank(getattr(record, attr)):
            record.add_error(attr, message)


def validate_format(record: ValidationMixin, attr: str, pattern: re.Pattern, message: str = "is invalid") -> None:
    value = getattr(record, attr)
    if value is None:
        return
    if not pattern.match(str(value)):
        record.add_error(attr, message)


def validate_email(record: ValidationMixin, attr: str, message: str = "is invalid") -> None:
    value = getattr(record, attr)
    if value is None:
        return
    try:
        _email_adapter.validate_python(value)
    except ValidationError:
        record.add_error(attr, message)


def validate_length(record: ValidationMixin, attr: str, maximum: int, message: str | None = None) -> None:
    value = getattr(record, attr)
    if value is None:
        return
    if len(value) > maximum:
        record.add_error(attr, message or f"is too long (maximum is {maximum} characters)")


def validate_numericality(
    record: ValidationMixin,
    attr: str,
    only_integer: bool = False,
    greater_than_or_equal_to: int | Decimal | None = None,
) -> None:
    value = getattr(record, attr)
    if value is None:
        return
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        record.add_error(attr, "is not a number")
        return
    if only_integer and number != number.to_integral_value():
        record.add_error(attr, "must be an integer")
        return
    if greater_than_or_equal_to is not None and number < greater_than_or_equal_to:
        record.add_error(attr, f"must be greater than or equal to {greater_than_or_equal_to}")


def validate_inclusion(record: ValidationMixin, attr: str, allowed: Iterable[Any], message: str = "is not included in the list") -> None:
    if getattr(record, attr) not in list(allowed):
        record.add_error(attr, message)


def validate_uniqueness(
    record: ValidationMixin,
    db: Session,
    attr: str,
    scope: tuple[str, ...] = (),
    message: str = "has already been taken",
) -> None:
    value = getattr(record, attr)
    if value is None:
        return
    model = type(record)
    stmt = select(model.id).where(getattr(model, attr) == value)
    for column in scope:
        scoped = getattr(record, column)
        if scoped is None:
            stmt = stmt.where(getattr(model, column).is_(None))
        else:
            stmt = stmt.where(getattr(model, column) == scoped)
    if record.id is not None:
        stmt = stmt.where(model.id != record.id)
    with db.no_autoflush:
        taken = db.execute(stmt.limit(1)).first() is not None
    if taken:
        record.add_error(attr, message)


# -------------------------
# Persistence
# -------------------------

def save(db: Session, record: ValidationMixin):
    if not record.is_valid(db):
        if record in db.new:
            db.expunge(record)
        raise RecordInvalid(record)
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


def destroy(db: Session, record: ValidationMixin) -> bool:
    record.errors.clear()
    record.check_destroy_restrictions()
    if not record.before_destroy(db):
        logger.info("Refused to delete %s #%s", type(record).__name__, record.id)
        return False
    db.delete(record)
    db.commit()
    return True


@event.listens_for(Session, "before_flush")
def _validate_before_flush(session: Session, flush_context, instances) -> None:
    for obj in list(session.new) + list(session.dirty):
        if not isinstance(obj, ValidationMixin):
            continue
        if obj in session.dirty and not session.is_modified(obj, include_collections=False):
            continue
        if not obj.is_valid(session):
            raise RecordInvalid(obj)
