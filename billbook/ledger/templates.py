"""
Bill templates.

Templates are kept in a local JSON file (the templates_path setting),
not in the ledger storage. A missing or unreadable file means "no templates".
"""

import json
from decimal import Decimal
from pathlib import Path
from typing import Iterable, Optional, Union

import structlog
from pydantic import ValidationError

from billbook.config import get_settings
from billbook.models.ledger import Bill, BillTemplate, new_id

logger = structlog.get_logger(__name__)


def create_template(
    name: str,
    amount: Optional[Decimal] = None,
    category_id: Optional[str] = None,
    auto_add: bool = False,
) -> BillTemplate:
    return BillTemplate(
        id=new_id(),
        name=name,
        amount=amount,
        category_id=category_id,
        auto_add=auto_add,
    )


def template_to_bill(template: BillTemplate) -> Bill:
    """A fresh bill (new id) carrying the template's name, amount and category."""
    return Bill(
        id=new_id(),
        name=template.name,
        amount=template.amount,
        category_id=template.category_id,
    )


def _templates_file(path: Union[str, Path, None]) -> Path:
    return Path(path if path is not None else get_settings().app.templates_path)


def load_templates(path: Union[str, Path, None] = None) -> list[BillTemplate]:
    """Read templates; logs and returns [] when the file is absent or corrupt."""
    path = _templates_file(path)
    if not path.exists():
        return []
    try:
        data = json.loads(path.read_text(encoding="utf-8"), parse_float=Decimal)
        if not isinstance(data, list):
            raise ValueError("templates file must hold a JSON array")
        return [BillTemplate.model_validate(item) for item in data]
    except (OSError, ValueError, ValidationError) as e:
        logger.error("templates_load_failed", path=str(path), error=str(e))
        return []


def save_templates(templates: Iterable[BillTemplate], path: Union[str, Path, None] = None) -> None:
    """Write templates with the camelCase names earlier versions used."""
    payload = [
        t.model_dump(mode="json", by_alias=True, exclude_none=True)
        for t in templates
    ]
    _templates_file(path).write_text(
        json.dumps(payload, indent=2, ensure_ascii=False),
        encoding="utf-8",
    )
