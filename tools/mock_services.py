"""
Lightweight mock of the spreadsheet and VK APIs for live e2e testing.

Endpoints:
- POST /v4/spreadsheets/<id>/values/<range>:append -> stores row, returns 200
- POST /method/notifications.sendMessage          -> stores message, returns VK success
- GET  /_rows                                      -> returns appended rows
- GET  /_notifications                             -> returns sent notifications
- POST /_reset                                     -> clears stored data
- GET  /_health                                    -> returns 200

Point the gateway at it with
SPREADSHEET_API_URL=http://localhost:8080/v4/spreadsheets and
VK_API_URL=http://localhost:8080/method.
"""
import json
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import List
from urllib.parse import parse_qs


ROWS: List[list] = []
NOTIFICATIONS: List[dict] = []


class Handler(BaseHTTPRequestHandler):
    def _send_json(self, status_code: int, payload: dict) -> None:
        body = json.dumps(payload).encode("utf-8")
        self.send_response(status_code)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def _read_body(self) -> str:
        length = int(self.headers.get("Content-Length", "0"))
        return self.rfile.read(length).decode("utf-8") if length else ""

    def do_GET(self):  # noqa: N802
        if self.path == "/_health":
            return self._send_json(200, {"status": "ok"})

        if self.path == "/_rows":
            return self._send_json(200, {"rows": ROWS})

        if self.path == "/_notifications":
            return self._send_json(200, {"notifications": NOTIFICATIONS})

        return self._send_json(404, {"error": "not_found"})

    def do_POST(self):  # noqa: N802
        if self.path == "/_reset":
            ROWS.clear()
            NOTIFICATIONS.clear()
            return self._send_json(200, {"status": "reset"})

        path = self.path.split("?", 1)[0]
        raw = self._read_body()

        if path.startswith("/v4/spreadsheets/") and path.endswith(":append"):
            try:
                payload = json.loads(raw) if raw else {}
            except json.JSONDecodeError:
                return self._send_json(400, {"error": {"message": "Invalid JSON"}})
            values = payload.get("values", [])
            ROWS.extend(values)
            return self._send_json(200, {"updates": {"updatedRows": len(values)}})

        if path == "/method/notifications.sendMessage":
            form = {k: v[0] for k, v in parse_qs(raw).items()}
            NOTIFICATIONS.append({"user_ids": form.get("user_ids"), "message": form.get("message")})
            return self._send_json(200, {"response": [{"user_id": form.get("user_ids"), "status": True}]})

        return self._send_json(404, {"error": "not_found"})

    def log_message(self, format, *args):  # noqa: A003
        # Silence default logging to keep test output clean.
        return


def main() -> None:
    server = HTTPServer(("0.0.0.0", 8080), Handler)
    server.serve_forever()


if __name__ == "__main__":
    main()
