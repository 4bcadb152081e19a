from fastapi import APIRouter, Depends

from slack_send.dispatcher import Dispatcher
from slack_send.errors import from_report
from slack_send.schemas.actions import ErrorRequest, HaltRequest, InvokeRequest

router = APIRouter(tags=["actions"])

_dispatcher = Dispatcher()


def get_dispatcher() -> Dispatcher:
    return _dispatcher


@router.post("/invoke", summary="Send a message")
async def invoke(body: InvokeRequest, dispatcher: Dispatcher = Depends(get_dispatcher)):
    return await dispatcher.invoke(body.params, body.context)


@router.post("/error", summary="Classify a failed send and retry or give up")
async def handle_error(body: ErrorRequest, dispatcher: Dispatcher = Depends(get_dispatcher)):
    report = body.error
    error = from_report(report.type, report.message, report.status, report.platform_code)
    return await dispatcher.error(body.params, body.context, error)


@router.post("/halt", summary="Acknowledge a shutdown")
async def halt(body: HaltRequest, dispatcher: Dispatcher = Depends(get_dispatcher)):
    return await dispatcher.halt(body.reason, body.context)
