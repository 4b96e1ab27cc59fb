"""FastAPI route handlers."""

from fastapi import Request, Response
from fastapi.responses import PlainTextResponse

from core.codec import parse_target
from core.config import Config
from core.exceptions import (
    InvalidTargetError,
    RewriteError,
    UpstreamError,
    UpstreamTimeoutError,
)
from core.protocols import RequestLogger


def ready_message(param: str) -> str:
    return f"Proxy ready — provide ?{param}=<base64(url)>"


async def handle_proxy(
    request: Request,
    config: Config,
    logger: RequestLogger,
) -> Response:
    """Handle the relay entry point."""
    param = config.relay.target_param
    token = request.query_params.get(param)
    if not token:
        return PlainTextResponse(ready_message(param))

    try:
        target = parse_target(token)
    except InvalidTargetError as e:
        return PlainTextResponse(
            f"Invalid target. Use ?{param}=<base64 of full https:// URL> ({e})",
            status_code=400,
        )

    relay_service = request.app.state.relay_service
    try:
        return await relay_service.relay(target, request.headers)
    except InvalidTargetError as e:
        return PlainTextResponse(f"Invalid target: {e}", status_code=400)
    except UpstreamTimeoutError as e:
        logger.log_error(target, 504, str(e))
        return PlainTextResponse(f"Upstream fetch error: {e}", status_code=504)
    except UpstreamError as e:
        logger.log_error(target, 502, str(e))
        return PlainTextResponse(f"Upstream fetch error: {e}", status_code=502)
    except RewriteError as e:
        logger.log_error(target, 500, str(e))
        return PlainTextResponse(f"Rewrite error: {e}", status_code=500)


async def handle_preflight(_request: Request) -> Response:
    """Acknowledge CORS preflight requests."""
    return Response(status_code=200)
