"""HTTP admin API: health, tool catalog, tool invocation, resource reads.

Unlike the MCP wire, failures here carry the error kind so callers can tell
their own mistakes apart from upstream or internal ones.
"""
import json
import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from .server import ToolServer
from .tools.errors import ErrorKind, ToolError, UnknownResourceError

logger = logging.getLogger(__name__)

_STATUS_BY_KIND = {
    ErrorKind.UNKNOWN_TOOL: 404,
    ErrorKind.INVALID_INPUT: 422,
    ErrorKind.HANDLER_FAILED: 502,
    ErrorKind.INVALID_OUTPUT: 500,
}


def error_response(error: ToolError) -> JSONResponse:
    body = {"kind": error.kind.value, "message": error.message}
    if error.field is not None:
        body.update(field=error.field, expected=error.expected, got=error.got)
    return JSONResponse(status_code=_STATUS_BY_KIND[error.kind], content={"error": body})


def create_app(tool_server: ToolServer) -> FastAPI:
    app = FastAPI(title=tool_server.settings.server_name, version=tool_server.settings.server_version)
    app.state.tool_server = tool_server

    @app.get("/health")
    async def health():
        return {"ok": True, "state": tool_server.state.value}

    @app.get("/tools")
    async def list_tools():
        out = []
        for tool in tool_server.tools():
            entry = {
                "name": tool.name,
                "description": tool.description,
                "inputSchema": tool.input_schema(),
            }
            if tool.output is not None:
                entry["outputSchema"] = tool.output_schema()
            out.append(entry)
        return out

    @app.post("/tools/{name}")
    async def call_tool(name: str, request: Request):
        raw = await request.body()
        try:
            arguments = json.loads(raw) if raw.strip() else None
        except json.JSONDecodeError as e:
            return error_response(ToolError(
                kind=ErrorKind.INVALID_INPUT, tool=name, message=f"Invalid JSON body: {e}",
            ))

        outcome = await tool_server.call_tool(name, arguments)
        if not outcome.ok:
            return error_response(outcome.error)
        return outcome.envelope.to_wire()

    @app.get("/resources")
    async def list_resources():
        return [r.model_dump(by_alias=True) for r in tool_server.list_resources()]

    @app.get("/resources/read")
    async def read_resource(uri: str):
        try:
            contents = await tool_server.read_resource(uri)
        except UnknownResourceError as e:
            raise HTTPException(status_code=404, detail=str(e))
        return contents.model_dump(by_alias=True)

    return app
