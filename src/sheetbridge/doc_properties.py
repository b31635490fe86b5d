from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict
from typing_extensions import Self

from .sync import ValueHandle
from .values import DateLike, coerce_datetime


class DocPropertiesSpec(BaseModel):
    """Frozen document metadata written to docProps/core.xml."""

    model_config = ConfigDict(frozen=True)

    title: str | None = None
    subject: str | None = None
    author: str | None = None
    manager: str | None = None
    company: str | None = None
    category: str | None = None
    keywords: str | None = None
    comment: str | None = None
    status: str | None = None
    hyperlink_base: str | None = None
    creation_datetime: dt.datetime | None = None


class DocProperties(ValueHandle[DocPropertiesSpec]):
    def __init__(self) -> None:
        self._init_value(DocPropertiesSpec())

    def set_title(self, title: str) -> Self:
        return self._update(title=title)

    def set_subject(self, subject: str) -> Self:
        return self._update(subject=subject)

    def set_author(self, author: str) -> Self:
        return self._update(author=author)

    def set_manager(self, manager: str) -> Self:
        return self._update(manager=manager)

    def set_company(self, company: str) -> Self:
        return self._update(company=company)

    def set_category(self, category: str) -> Self:
        return self._update(category=category)

    def set_keywords(self, keywords: str) -> Self:
        return self._update(keywords=keywords)

    def set_comment(self, comment: str) -> Self:
        return self._update(comment=comment)

    def set_status(self, status: str) -> Self:
        return self._update(status=status)

    def set_hyperlink_base(self, base: str) -> Self:
        return self._update(hyperlink_base=base)

    def set_creation_datetime(self, value: DateLike) -> Self:
        """Set the creation timestamp. Dates without a time use midnight."""
        native = coerce_datetime(value).to_python()
        if isinstance(native, dt.time):
            native = dt.datetime.combine(dt.date(1900, 1, 1), native)
        elif not isinstance(native, dt.datetime):
            native = dt.datetime.combine(native, dt.time(0, 0))
        return self._update(creation_datetime=native)
