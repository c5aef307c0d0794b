# wholesale/services/settings_service.py
from typing import Any

from sqlalchemy.orm import Session

from wholesale.domain.models import EmailSettings, ShopSettings
from wholesale.repos.settings_repo import SettingsRepo
from wholesale.utils.settings import (
    ADMIN_EMAIL,
    FREE_SHIPPING_DAYS,
    FREE_SHIPPING_MESSAGE,
    FREE_SHIPPING_THRESHOLD,
)
from wholesale.utils.logging import get_logger

logger = get_logger(__name__)


def default_shop_settings() -> ShopSettings:
    return ShopSettings(
        free_shipping_threshold=FREE_SHIPPING_THRESHOLD,
        free_shipping_message=FREE_SHIPPING_MESSAGE,
        free_shipping_days=FREE_SHIPPING_DAYS,
        email=EmailSettings(admin_email=ADMIN_EMAIL),
    )


def merge_settings(base: ShopSettings, changes: dict[str, Any]) -> ShopSettings:
    """changes w snake_case, email mergowany pole po polu"""
    data = base.model_dump()
    for key, value in changes.items():
        if key == "email" and isinstance(value, dict):
            data["email"] = {**data["email"], **value}
        else:
            data[key] = value
    return ShopSettings.model_validate(data)


class SettingsService:
    """
    Ustawienia sklepu czytane swiezo przy kazdym requescie,
    admin moze je zmienic miedzy zapytaniami.
    """

    def __init__(self, db: Session):
        self.repo = SettingsRepo(db)

    def load(self) -> ShopSettings:
        stored = self.repo.get()
        if not stored:
            return default_shop_settings()
        return merge_settings(default_shop_settings(), stored)

    def update(self, changes: dict[str, Any]) -> ShopSettings:
        updated = merge_settings(self.load(), changes)
        self.repo.put(updated.model_dump(mode="json"))
        logger.info(f"Shop settings updated: {sorted(changes)}")
        return updated
