import base64
import json
import sqlite3
from typing import Any, Dict, List, Optional

import requests


def make_response(payload: Any, status: int = 200, raw: Optional[str] = None) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp._content = (raw if raw is not None else json.dumps(payload)).encode("utf-8")
    resp.encoding = "utf-8"
    resp.headers["Content-Type"] = "application/json"
    return resp


def _arg_value(arg: Dict[str, Any]) -> Any:
    kind = arg["type"]
    if kind == "null":
        return None
    if kind == "integer":
        return int(arg["value"])
    if kind == "float":
        return float(arg["value"])
    if kind == "blob":
        return base64.b64decode(arg["base64"])
    return arg["value"]


def _cell(value: Any) -> Dict[str, Any]:
    if value is None:
        return {"type": "null"}
    if isinstance(value, int):
        return {"type": "integer", "value": str(value)}
    if isinstance(value, float):
        return {"type": "float", "value": value}
    if isinstance(value, bytes):
        # pipeline 服务端返回的 base64 不带 padding
        return {"type": "blob", "base64": base64.b64encode(value).decode("ascii").rstrip("=")}
    return {"type": "text", "value": value}


class FakePipelineServer:
    """在内存 sqlite 上执行 pipeline 请求，按远端格式返回 JSON。"""

    def __init__(self) -> None:
        self.conn = sqlite3.connect(":memory:", isolation_level=None)
        self.calls: List[Dict[str, Any]] = []

    @property
    def statements(self) -> List[str]:
        return [c["json"]["requests"][0]["stmt"]["sql"] for c in self.calls]

    def post(self, url, headers=None, json=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "json": json, "timeout": timeout})
        results = []
        for req in json["requests"]:
            if req["type"] == "close":
                results.append({"type": "ok", "response": {"type": "close"}})
            else:
                results.append(self._execute(req["stmt"]))
        return make_response({"baton": None, "base_url": None, "results": results})

    def _execute(self, stmt: Dict[str, Any]) -> Dict[str, Any]:
        args = [_arg_value(a) for a in stmt.get("args", [])]
        try:
            cur = self.conn.execute(stmt["sql"], args)
            rows = cur.fetchall()
        except sqlite3.Error as exc:
            return {"type": "error", "error": {"message": str(exc), "code": "SQLITE_ERROR"}}
        is_write = stmt["sql"].lstrip().upper().startswith(("INSERT", "UPDATE", "DELETE"))
        return {
            "type": "ok",
            "response": {
                "type": "execute",
                "result": {
                    "cols": [{"name": d[0], "decltype": None} for d in cur.description or []],
                    "rows": [[_cell(v) for v in row] for row in rows],
                    "affected_row_count": max(cur.rowcount, 0),
                    "last_insert_rowid": str(cur.lastrowid) if is_write and cur.lastrowid else None,
                },
            },
        }

    def close(self) -> None:
        self.conn.close()
