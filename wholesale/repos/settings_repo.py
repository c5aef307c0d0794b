from datetime import datetime, timezone

from sqlalchemy.orm import Session

from wholesale.data.models.shop_settings import ShopSettingsModel

SHOP_SETTINGS_KEY = "shop"


class SettingsRepo:
    def __init__(self, db: Session):
        self.db = db

    def get(self, key: str = SHOP_SETTINGS_KEY) -> dict | None:
        row = self.db.get(ShopSettingsModel, key)
        return dict(row.value) if row else None

    def put(self, value: dict, key: str = SHOP_SETTINGS_KEY) -> None:
        row = self.db.get(ShopSettingsModel, key)
        if row is None:
            row = ShopSettingsModel(key=key, value=value)
            self.db.add(row)
        else:
            row.value = value
        row.updated_at = datetime.now(timezone.utc)
        self.db.commit()
