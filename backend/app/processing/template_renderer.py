"""
TemplateRenderer — merges booking fields into the HTML template.

Substitution is literal and case-sensitive: every occurrence of the five
known placeholders is replaced, anything else in ``{{...}}`` form is left
as-is.  The result is never parsed or validated as HTML.

Whether values are HTML-escaped is an explicit policy
(``SubstitutionPolicy``).  ``TRUST`` inserts values verbatim, so a value
containing markup becomes markup in the rendered page.
"""

from __future__ import annotations

import html
import re
from collections.abc import Mapping
from pathlib import Path

from app.core.constants import BookingField, SubstitutionPolicy
from app.core.logging import get_logger
from app.pipeline.errors import BookingFieldError, TemplateError

logger = get_logger(__name__)


PLACEHOLDER_RE = re.compile(r"\{\{(" + "|".join(re.escape(f.value) for f in BookingField) + r")\}\}")


def substitute(
    template: str,
    fields: Mapping[str, str],
    policy: SubstitutionPolicy = SubstitutionPolicy.TRUST,
) -> str:
    """
    Replace each booking placeholder in ``template`` with its field value.

    All placeholders are matched against the template in a single pass, so
    a value that itself contains ``{{email}}`` is inserted as-is.
    """
    values = {}
    for booking_field in BookingField:
        value = fields.get(booking_field.value)
        if not isinstance(value, str):
            raise BookingFieldError(
                f"Booking field '{booking_field.value}' is missing or not a string",
                field_name=booking_field.value,
            )
        if policy == SubstitutionPolicy.ESCAPE:
            value = html.escape(value, quote=True)
        values[booking_field.value] = value
    return PLACEHOLDER_RE.sub(lambda match: values[match.group(1)], template)


class TemplateRenderer:
    """Loads one template file and renders booking fields into it."""

    def __init__(
        self,
        template_path: str | Path,
        policy: SubstitutionPolicy = SubstitutionPolicy.TRUST,
    ) -> None:
        self.template_path = Path(template_path)
        self.policy = policy
        self._template: str | None = None

    def load(self) -> str:
        """Read the template once and cache it."""
        if self._template is None:
            try:
                self._template = self.template_path.read_text(encoding="utf-8")
            except OSError as exc:
                raise TemplateError(
                    f"Template not readable: {self.template_path}",
                    details={"path": str(self.template_path)},
                ) from exc
            logger.debug("Template loaded", path=str(self.template_path))
        return self._template

    def render(self, fields: Mapping[str, str]) -> str:
        return substitute(self.load(), fields, self.policy)
