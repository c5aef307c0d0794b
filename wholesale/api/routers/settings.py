# wholesale/api/routers/settings.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from wholesale.api.deps import require_admin
from wholesale.data.database import get_db
from wholesale.domain.models import ShopSettings
from wholesale.domain.schemas import ShopSettingsUpdateIn
from wholesale.services.settings_service import SettingsService

router = APIRouter(
    prefix="/admin/settings",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


@router.get("/", response_model=ShopSettings)
def get_settings(db: Session = Depends(get_db)):
    return SettingsService(db).load()


@router.put("/", response_model=ShopSettings)
def update_settings(payload: ShopSettingsUpdateIn, db: Session = Depends(get_db)):
    """Zapisuje tylko przeslane pola, reszta zostaje bez zmian."""
    return SettingsService(db).update(payload.model_dump(exclude_unset=True))
