from fastapi import APIRouter, Response, UploadFile

from guideflow.dependencies import GuideServiceDep, ImportServiceDep
from guideflow.guides.importers.schemas import ImportResult, ParsedFlowBox
from guideflow.guides.schemas import GuideCreate, GuideDetail, GuideResponse

router = APIRouter()


@router.post("/", status_code=201, response_model=GuideResponse)
async def create_guide(data: GuideCreate, service: GuideServiceDep) -> GuideResponse:
    return await service.create(data)


@router.get("/", response_model=list[GuideResponse])
async def list_guides(service: GuideServiceDep) -> list[GuideResponse]:
    return await service.list_all()


@router.get("/{guide_id}", response_model=GuideDetail)
async def get_guide(guide_id: int, service: GuideServiceDep) -> GuideDetail:
    return await service.get_detail(guide_id)


@router.post("/import/markdown/preview", response_model=list[ParsedFlowBox])
async def preview_markdown(file: UploadFile, service: ImportServiceDep) -> list[ParsedFlowBox]:
    content = await file.read()
    text = service.decode_upload(content, file.filename or "upload.md")
    return service.preview_markdown(text)


@router.post("/{guide_id}/import/markdown", status_code=201, response_model=ImportResult)
async def import_markdown(
    guide_id: int,
    file: UploadFile,
    response: Response,
    service: ImportServiceDep,
) -> ImportResult:
    filename = file.filename or "upload.md"
    text = service.decode_upload(await file.read(), filename)
    result = await service.import_markdown(guide_id, text, filename)
    if not result.success:
        response.status_code = 500
    return result


@router.post("/{guide_id}/import/csv", status_code=201, response_model=ImportResult)
async def import_csv(
    guide_id: int,
    file: UploadFile,
    response: Response,
    service: ImportServiceDep,
) -> ImportResult:
    filename = file.filename or "upload.csv"
    text = service.decode_upload(await file.read(), filename)
    result = await service.import_csv(guide_id, text, filename)
    if not result.success:
        response.status_code = 500
    return result
