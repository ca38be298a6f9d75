from typing import Annotated

from fastapi import Depends

from guideflow.database import get_db
from guideflow.guides.importers.service import ImportService
from guideflow.guides.repository import GuideRepository
from guideflow.guides.service import GuideService


def get_guide_repo() -> GuideRepository:
    return GuideRepository(get_db())


def get_guide_service() -> GuideService:
    return GuideService(get_guide_repo())


def get_import_service() -> ImportService:
    return ImportService(get_guide_service())


GuideServiceDep = Annotated[GuideService, Depends(get_guide_service)]
ImportServiceDep = Annotated[ImportService, Depends(get_import_service)]
