# CFDDNS-Server
# (C) 2015-2024 Tomas Hlavacek (tmshlvck@gmail.com)
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

from fastapi import FastAPI, Request, Response, status
from fastapi.responses import PlainTextResponse
import logging
from contextlib import asynccontextmanager

from .cloudflare import CloudflareClient
from .errors import DDNSError, BadRequest, RoutingMiss
from .metrics import start_metrics_server
from .request import interpret_request
from .settings import Settings, settings
from .view import ddns_update

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def plain_response(content: str, status_code: int) -> PlainTextResponse:
    return PlainTextResponse(
        content=content,
        status_code=status_code,
        media_type='text/plain;charset=UTF-8',
        headers={'Cache-Control': 'no-store'})


def create_app(settings: Settings) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        start_metrics_server(settings.METRICS_PORT, settings.LISTEN_ADDRESS)
        yield

    # No docs or openapi routes, the only route is the catch-all below
    app = FastAPI(root_path=settings.ROOT_PATH, lifespan=lifespan,
                  docs_url=None, redoc_url=None, openapi_url=None)

    @app.exception_handler(DDNSError)
    async def ddns_exception_handler(request: Request, exc: DDNSError):
        if isinstance(exc, BadRequest):
            logging.warning(f"Rejected request {request.method} {request.url.path}: {exc.reason}")
        elif not isinstance(exc, RoutingMiss):
            logging.error(f"DYNDNS update failed {exc.status_code}: {exc.reason}")
        return plain_response(exc.reason, exc.status_code)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logging.error(f"Unhandled Exception - Request: {request.method} {request.url.path} - Type: {type(exc).__name__}",
                      exc_info=exc)
        return plain_response("Internal Server Error", status.HTTP_500_INTERNAL_SERVER_ERROR)

    # DynDNS-style example query:
    # GET /update?hostname=host.example.com&ip=1.2.3.4 HTTP/1.1
    # Authorization: Basic base64(example.com:<cloudflare API token>)
    @app.api_route("/{path:path}", methods=ALL_METHODS)
    async def handle_update(request: Request) -> Response:
        update_request = interpret_request(request, settings)
        if update_request is None:
            return Response(status_code=status.HTTP_204_NO_CONTENT)

        source_ip = request.client.host if request.client else None
        logging.info(f"DYNDNS update: hostnames {update_request.hostnames} ips {update_request.ips} "
                     f"user: {update_request.username} source_ip: {source_ip}")

        client = CloudflareClient(
            update_request.token,
            base_url=settings.CF_API_URL,
            timeout=settings.CF_API_TIMEOUT,
            access_group_name=settings.ACCESS_GROUP_NAME)
        return plain_response(await ddns_update(client, update_request), status.HTTP_200_OK)

    return app


app = create_app(settings)
