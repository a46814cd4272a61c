from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from contextvars import ContextVar

import logging
import uuid

REQUEST_ID_HEADER = "X-Request-ID"

# Define the ContextVar to store the request ID
request_id_context: ContextVar[str] = ContextVar("request_id", default="N/A")

logger = logging.getLogger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    @classmethod
    def request_id_context(cls):
        return request_id_context

    async def dispatch(self, request: Request, call_next):
        # Reuse the caller's id so logs can be correlated across services
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())[:8]
        token = request_id_context.set(request_id)

        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
        except Exception:
            logger.exception("Unhandled error during %s %s.", request.method, request.url.path)
            raise
        finally:
            # Reset the context variable when the request is done
            request_id_context.reset(token)

        return response
