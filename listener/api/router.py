import urllib.parse

from fastapi import APIRouter, Request, Response
from fastapi.responses import RedirectResponse

from ..core.service import Listener
from ..errors import RequestRejected
from ..models import IncomingRequest

router = APIRouter()

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


@router.get("/")
async def home(request: Request):
    return RedirectResponse(request.app.state.settings.REDIRECT_URL, status_code=302)


@router.get("/uptime")
async def uptime():
    return Response(status_code=200)


@router.post("/")
async def receive_webhook(request: Request):
    """Main ingress for source-control webhook deliveries."""
    listener: Listener = request.app.state.listener
    incoming = await to_incoming(request, request.app.state.settings.TRUST_FORWARDED_FOR)

    try:
        await listener.receive(incoming)
    except RequestRejected as e:
        return Response(status_code=e.status_code)

    return Response(status_code=204)


async def to_incoming(request: Request, trust_forwarded_for: bool = False) -> IncomingRequest:
    body = await request.body()
    headers = request.headers

    return IncomingRequest(
        client_ip=client_ip(request, trust_forwarded_for),
        event_header=headers.get("x-github-event"),
        request_id=headers.get("x-request-id"),
        github_guid=headers.get("x-github-guid"),
        github_delivery=headers.get("x-github-delivery"),
        form_payload=form_payload(request, body),
        body=body,
    )


def form_payload(request: Request, body: bytes) -> str | None:
    """The ``payload`` field of a form-encoded body, else of the query string."""
    if request.headers.get("content-type", "").startswith(FORM_CONTENT_TYPE):
        form_data = urllib.parse.parse_qs(body.decode("utf-8", errors="replace"))
        if form_data.get("payload"):
            return form_data["payload"][0]
    return request.query_params.get("payload")


def client_ip(request: Request, trust_forwarded_for: bool = False) -> str | None:
    if trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for", "")
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.client.host if request.client else None
