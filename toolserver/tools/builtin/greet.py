"""Greeting tool — localized hello."""
from ...config import Settings
from ...contracts import Param, text_output_contract
from ..registry import ToolDescriptor

DESCRIPTION = "Returns a greeting for the given name and language."


async def greet(name: str, language: str = "en") -> str:
    if language == "ko":
        return f"안녕하세요, {name}님!"
    return f"Hey there, {name}! 👋 Nice to meet you!"


def descriptor(settings: Settings) -> ToolDescriptor:
    return ToolDescriptor(
        name="greet",
        description=DESCRIPTION,
        params=(
            Param("name", description="name of the person to greet"),
            Param(
                "language",
                type="enum",
                values=("ko", "en"),
                required=False,
                default="en",
                description="greeting language (default: en)",
            ),
        ),
        handler=greet,
        output=tuple(text_output_contract("greeting")),
    )
