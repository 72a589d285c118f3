"""
请求体解析：JSON 与表单（urlencoded / multipart）统一解析为 dict
"""
import json

from fastapi import Request

from taskboard.core.errors import BadRequestError

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def parse_body(request: Request) -> dict:
    """
    FastAPI dependency - 按 Content-Type 解析请求体

    空请求体返回 {}。JSON 格式错误或顶层不是对象时返回 400。
    """
    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()

    if content_type in FORM_CONTENT_TYPES:
        form = await request.form()
        return {key: value for key, value in form.items()}

    raw = await request.body()
    if not raw.strip():
        return {}

    try:
        body = json.loads(raw)
    except ValueError as e:
        raise BadRequestError(f"Malformed JSON body: {e}") from e

    if not isinstance(body, dict):
        raise BadRequestError("JSON body must be an object")
    return body
