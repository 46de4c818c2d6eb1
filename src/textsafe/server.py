"""HTTP sidecar server for textsafe.

Runs a lightweight stdlib HTTP server bound to localhost so a client UI can
call the engines without spawning a subprocess per request.

Endpoints:
    POST /convert   — {"tool": "json-csv", "text": "..."} → {"text": "..."}
    POST /detect    — {"text": "...", "config": {...}}    → {"summary": ..., "sample": [...]}
    POST /redact    — {"text": "...", "config": {...}}    → {"text": "..."}
    GET  /health    — Health check

Failures return 400 with the classified {"stage", "message"} body.
"""

from __future__ import annotations
import json
import logging
import os
from http.server import HTTPServer, BaseHTTPRequestHandler
from typing import Any

from .classifier import classify
from .config import load_config
from .converters import convert
from .redactor import apply_redaction, detect_sensitive

logger = logging.getLogger(__name__)

DEFAULT_PORT = int(os.environ.get("TEXTSAFE_PORT", "18792"))


def handle_convert(body: dict[str, Any]) -> dict[str, Any]:
    return {"text": convert(body.get("tool", "format"), body.get("text", ""))}


def handle_detect(body: dict[str, Any]) -> dict[str, Any]:
    config = load_config(body.get("config"))
    return detect_sensitive(body.get("text", ""), config).as_dict()


def handle_redact(body: dict[str, Any]) -> dict[str, Any]:
    config = load_config(body.get("config"))
    return {"text": apply_redaction(body.get("text", ""), config)}


# path → (handler, classifier context)
ROUTES = {
    "/convert": (handle_convert, "convert"),
    "/detect": (handle_detect, "preview"),
    "/redact": (handle_redact, "redact"),
}


def dispatch(path: str, body: dict[str, Any]) -> tuple[int, dict[str, Any]]:
    """Run a POST route and return (status, payload)."""
    route = ROUTES.get(path)
    if route is None:
        return 404, {"error": "not found"}

    handler, context = route
    try:
        return 200, handler(body)
    except Exception as exc:
        logger.debug("%s failed", path, exc_info=True)
        return 400, classify(context, exc).as_dict()


class TextSafeHandler(BaseHTTPRequestHandler):
    """HTTP request handler for the textsafe sidecar."""

    def _read_json(self) -> dict[str, Any]:
        length = int(self.headers.get("Content-Length", 0))
        body = self.rfile.read(length).decode("utf-8")
        return json.loads(body) if body else {}

    def _respond(self, status: int, data: Any) -> None:
        body = json.dumps(data, ensure_ascii=False).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args: Any) -> None:
        logger.debug(format, *args)

    def do_GET(self) -> None:
        if self.path == "/health":
            self._respond(200, {"status": "ok"})
        else:
            self._respond(404, {"error": "not found"})

    def do_POST(self) -> None:
        try:
            body = self._read_json()
        except ValueError:
            self._respond(400, {"error": "request body must be JSON"})
            return
        if not isinstance(body, dict):
            self._respond(400, {"error": "request body must be a JSON object"})
            return
        self._respond(*dispatch(self.path, body))


def serve(port: int = DEFAULT_PORT) -> None:
    """Start the textsafe HTTP sidecar."""
    server = HTTPServer(("127.0.0.1", port), TextSafeHandler)
    logger.info("textsafe sidecar listening on http://127.0.0.1:%d", port)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down...")
        server.shutdown()


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description="textsafe HTTP sidecar")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--log-level", default=os.environ.get("TEXTSAFE_LOG_LEVEL", "INFO"))
    args = parser.parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    serve(port=args.port)
