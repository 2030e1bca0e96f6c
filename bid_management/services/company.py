"""Company profile settings (single row)."""

import logging
from datetime import datetime, timezone

from ..auth import require
from ..auth.permissions import USER_ADMIN_ROLES
from ..database.base import COMPANY_SETTINGS, Store
from ..models import COMPANY_SETTINGS_ID, CompanySettings, CompanySettingsUpdate, User

logger = logging.getLogger(__name__)


class CompanyService:
    def __init__(self, store: Store) -> None:
        self._store = store

    def get_settings(self) -> CompanySettings:
        row = self._store.get(COMPANY_SETTINGS, COMPANY_SETTINGS_ID)
        if row is None:
            return CompanySettings()
        return CompanySettings.model_validate(row)

    def update_settings(self, changes: CompanySettingsUpdate, user: User) -> CompanySettings:
        require(user, USER_ADMIN_ROLES, "update company settings")
        update = changes.model_dump(mode="json", exclude_unset=True)
        update["updated_at"] = datetime.now(timezone.utc).isoformat()
        update["updated_by"] = user.id

        if self._store.get(COMPANY_SETTINGS, COMPANY_SETTINGS_ID) is None:
            fields = {**CompanySettings().model_dump(), **changes.model_dump(exclude_unset=True)}
            fields["updated_by"] = user.id
            settings = CompanySettings(**fields)
            self._store.insert(COMPANY_SETTINGS, settings.to_record())
        else:
            settings = CompanySettings.model_validate(self._store.update(COMPANY_SETTINGS, COMPANY_SETTINGS_ID, update))
        logger.info(f"Company settings updated by {user.username}")
        return settings
