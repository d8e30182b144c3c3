"""
Category taxonomy.

Bills point at categories by id only. A category can disappear (a user
deletes their own, or an old export names one we no longer ship), so
every lookup here is total: unknown ids resolve to UNCATEGORIZED.
"""

from datetime import datetime, timezone
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field


class Category(BaseModel):
    """A category from the built-in taxonomy."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    color: str = Field(..., pattern=r"^#[0-9a-fA-F]{6}$")
    icon: str
    name_key: str = Field(
        ...,
        description="i18n key, resolved to a display name at render time"
    )

    def display_name(self, translate) -> str:
        """Resolve the display name with a `translate(key)` callable."""
        return translate(self.name_key)


class UserCategory(Category):
    """A category the user created; carries its own literal name."""

    name_key: str = ""
    user_id: str
    name: str = Field(..., min_length=1)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def display_name(self, translate) -> str:
        return self.name


DEFAULT_CATEGORIES: tuple[Category, ...] = (
    Category(id="electricity", color="#fbbf24", icon="⚡", name_key="categories.electricity"),
    Category(id="water", color="#3b82f6", icon="💧", name_key="categories.water"),
    Category(id="gas", color="#ef4444", icon="🔥", name_key="categories.gas"),
    Category(id="internet", color="#8b5cf6", icon="🌐", name_key="categories.internet"),
    Category(id="trash", color="#10b981", icon="🗑️", name_key="categories.trash"),
    Category(id="heating", color="#f97316", icon="🔥", name_key="categories.heating"),
    Category(id="insurance", color="#06b6d4", icon="🛡️", name_key="categories.insurance"),
    Category(id="other", color="#6b7280", icon="📋", name_key="categories.other"),
)

UNCATEGORIZED = Category(
    id="uncategorized",
    color="#9ca3af",
    icon="📋",
    name_key="categories.uncategorized",
)


def get_category_by_id(
    category_id: Optional[str],
    user_categories: Iterable[Category] = (),
) -> Optional[Category]:
    """Find a category by id; user categories shadow defaults."""
    if not category_id:
        return None
    for category in user_categories:
        if category.id == category_id:
            return category
    for category in DEFAULT_CATEGORIES:
        if category.id == category_id:
            return category
    return None


def resolve_category(
    category_id: Optional[str],
    user_categories: Iterable[Category] = (),
) -> Category:
    """Like get_category_by_id, but never returns None."""
    return get_category_by_id(category_id, user_categories) or UNCATEGORIZED
